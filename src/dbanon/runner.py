"""
Run orchestration: topology check, rule resolution, execution.
"""
import logging
from typing import List, Optional
from urllib.parse import urlparse

from sqlalchemy.exc import SQLAlchemyError

from dbanon.config import AnonymizeConfig
from dbanon.engine import AnonymizationEngine, ErrorKind, RunFailure, RunSummary
from dbanon.rules import groups
from dbanon.rules.resolver import RuleResolver
from dbanon.rules.statements import site_url_statement
from dbanon.session.gateway import error_text

logger = logging.getLogger(__name__)

# WordPress creates these tables only on multisite installations
MULTISITE_TABLES = ('blogs', 'site')


def requested_groups(config: AnonymizeConfig) -> List[str]:
    """Group names implied by the configuration toggles."""
    names = [groups.IDENTITY]
    if config.woocommerce:
        names.extend([groups.COMMERCE_BILLING, groups.COMMERCE_SHIPPING])
    if config.user_meta:
        names.append(groups.CUSTOM)
    return names


def check_topology(gateway, table_prefix: str) -> Optional[RunFailure]:
    """Refuse multisite installations."""
    try:
        multisite = any(gateway.has_table(f"{table_prefix}{name}") for name in MULTISITE_TABLES)
    except SQLAlchemyError as e:
        return RunFailure(ErrorKind.PRECONDITION, error_text(e))

    if multisite:
        return RunFailure(
            ErrorKind.UNSUPPORTED_TOPOLOGY,
            "This command doesn't support MultiSite yet."
        )
    return None


def site_host(gateway, table_prefix: str) -> str:
    """
    Host name of the site, for the confirmation prompt.

    Falls back to the database name when the options table has no site URL.
    """
    result = gateway.query(site_url_statement(table_prefix))
    if result.ok and result.rows and result.rows[0][0]:
        host = urlparse(result.rows[0][0]).hostname
        if host:
            return host
    return gateway.database_name or 'unknown'


def run_anonymization(gateway, config: AnonymizeConfig) -> RunSummary:
    """
    Anonymize the database behind ``gateway`` according to ``config``.

    Args:
        gateway: Connected StoreGateway
        config: Loaded configuration

    Returns:
        RunSummary describing what ran and, if the run stopped early, why.
    """
    names = requested_groups(config)

    failure = check_topology(gateway, config.table_prefix)
    if failure is not None:
        logger.error(failure.message)
        return RunSummary(requested_groups=names, failure=failure)

    resolver = RuleResolver(config.table_prefix, config.user_whitelist)
    rules = resolver.resolve(names, config.user_meta)
    logger.info(f"Resolved {len(rules)} rules from groups: {', '.join(names)}")

    engine = AnonymizationEngine(gateway, config.table_prefix)
    return engine.run(rules, requested_groups=names)
