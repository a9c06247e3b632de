"""
WordPress database anonymizer.

Overwrites personal data in a WordPress (and optionally WooCommerce) database
in place, using declarative masking rules grouped into toggleable groups.

Usage:
    from dbanon import load_config, run_anonymization
    from dbanon.session import StoreGateway, create_anon_engine

    config = load_config('config.yaml')
    gateway = StoreGateway(create_anon_engine(config.connection))
    summary = run_anonymization(gateway, config)
"""

from dbanon.config import AnonymizeConfig, load_config
from dbanon.engine import AnonymizationEngine, ErrorKind, RuleResult, RunFailure, RunSummary
from dbanon.exceptions import AnonymizeError, ConfigError
from dbanon.rules import Rule, RuleGroup, RuleResolver
from dbanon.runner import run_anonymization

__version__ = '0.2.0'

__all__ = [
    'AnonymizeConfig',
    'load_config',
    'AnonymizationEngine',
    'ErrorKind',
    'RuleResult',
    'RunFailure',
    'RunSummary',
    'AnonymizeError',
    'ConfigError',
    'Rule',
    'RuleGroup',
    'RuleResolver',
    'run_anonymization',
]
