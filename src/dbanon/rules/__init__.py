"""Masking rules, built-in rule groups, and rule resolution."""

from dbanon.rules.models import (
    PLACEHOLDER,
    Exclusion,
    FixedValue,
    KeyFilter,
    Placeholder,
    RandomNumber,
    Rule,
    RuleGroup,
)
from dbanon.rules.resolver import RuleResolver, parse_custom_fields
from dbanon.rules.statements import build_statement

__all__ = [
    'PLACEHOLDER',
    'Exclusion',
    'FixedValue',
    'KeyFilter',
    'Placeholder',
    'RandomNumber',
    'Rule',
    'RuleGroup',
    'RuleResolver',
    'parse_custom_fields',
    'build_statement',
]
