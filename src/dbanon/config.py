"""
Configuration management for the database anonymizer.

Settings come from, in increasing order of precedence:
    1. Built-in defaults
    2. Environment variables (a ``.env`` file is loaded if one is found)
    3. The ``anonymization:`` section of a YAML config file
    4. Explicit overrides (command-line options)

Environment variables:
    DB_ANON_CONNECTION  Full SQLAlchemy connection string
    WP_DB_USER, WP_DB_PASSWORD, WP_DB_HOST, WP_DB_NAME
                        Used to build a MySQL connection string when
                        DB_ANON_CONNECTION is not set
    WP_TABLE_PREFIX     Table prefix (default: wp_)
"""
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

import yaml
from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL

from dbanon.exceptions import ConfigError
from dbanon.rules.groups import DEFAULT_EXCLUDED_IDS
from dbanon.rules.statements import IDENTIFIER_PATTERN

logger = logging.getLogger(__name__)


@dataclass
class AnonymizeConfig:
    """
    Settings for one anonymization run.

    Attributes:
        connection: SQLAlchemy connection string
        table_prefix: Prefix of every WordPress table
        woocommerce: Also anonymize WooCommerce billing and shipping data
        confirm: Ask the operator before modifying the database
        user_meta: Comma-separated user meta key prefixes to anonymize
        user_whitelist: User IDs whose identity is never anonymized
    """
    connection: Optional[str] = None
    table_prefix: str = 'wp_'
    woocommerce: bool = False
    confirm: bool = True
    user_meta: str = ''
    user_whitelist: FrozenSet[int] = field(default_factory=lambda: DEFAULT_EXCLUDED_IDS)

    def validate(self):
        """Raise ConfigError if the settings cannot be used."""
        if not self.connection:
            raise ConfigError(
                "No database connection configured: set DB_ANON_CONNECTION, "
                "the WP_DB_* variables, or pass --connection"
            )
        if self.table_prefix and not IDENTIFIER_PATTERN.match(self.table_prefix):
            raise ConfigError(f"Invalid table prefix: {self.table_prefix!r}")


def parse_id_list(value: Union[str, int, Iterable, None]) -> FrozenSet[int]:
    """
    Parse a user ID whitelist.

    Accepts a comma-separated string ("1, 2,3"), a single integer, or a list.
    An empty string or list means no user is excluded.
    """
    if value is None:
        return frozenset()
    if isinstance(value, int):
        items = [value]
    elif isinstance(value, str):
        items = [item.strip() for item in value.split(',') if item.strip()]
    else:
        items = list(value)

    try:
        return frozenset(int(item) for item in items)
    except (TypeError, ValueError):
        raise ConfigError(f"User whitelist must contain integer IDs, got: {value!r}")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _load_env() -> Dict[str, Any]:
    """Read settings from the environment and an optional .env file."""
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
        logger.debug(f"Loaded environment from {env_file}")

    settings: Dict[str, Any] = {}

    connection = os.getenv('DB_ANON_CONNECTION')
    if not connection and os.getenv('WP_DB_NAME'):
        username = os.getenv('WP_DB_USER', 'root')
        password = os.getenv('WP_DB_PASSWORD', '')
        server = os.getenv('WP_DB_HOST', '127.0.0.1')
        database = os.environ['WP_DB_NAME']
        connection = URL.create(
            'mysql+pymysql', username=username, password=password, host=server, database=database
        ).render_as_string(hide_password=False)
    if connection:
        settings['connection'] = connection

    prefix = os.getenv('WP_TABLE_PREFIX')
    if prefix is not None:
        settings['table_prefix'] = prefix

    return settings


def _load_yaml(config_path: str) -> Dict[str, Any]:
    """Read the ``anonymization:`` section of a YAML config file."""
    if not os.path.exists(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file {config_path}: {e}")

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    section = config.get('anonymization') or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'anonymization' section in {config_path} must be a mapping")

    logger.debug(f"Loaded anonymization config from {config_path}")
    return section


def load_config(config_path: Optional[str] = None, **overrides) -> AnonymizeConfig:
    """
    Build the run configuration.

    Args:
        config_path: Optional path to a YAML config file
        **overrides: Explicit values (None means "not given")

    Returns:
        Validated AnonymizeConfig

    Raises:
        ConfigError: If a setting is malformed or no connection is configured
    """
    settings = _load_env()
    if config_path:
        # Blank YAML values mean "not set", like omitted overrides
        settings.update({key: value for key, value in _load_yaml(config_path).items() if value is not None})
    settings.update({key: value for key, value in overrides.items() if value is not None})

    known = {f.name for f in fields(AnonymizeConfig)}
    unknown = set(settings) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    if 'user_whitelist' in settings:
        settings['user_whitelist'] = parse_id_list(settings['user_whitelist'])
    for key in ('woocommerce', 'confirm'):
        if key in settings:
            settings[key] = _parse_bool(settings[key])
    if 'user_meta' in settings:
        user_meta = settings['user_meta']
        if isinstance(user_meta, (list, tuple)):
            user_meta = ','.join(str(item) for item in user_meta)
        settings['user_meta'] = str(user_meta)
    if 'table_prefix' in settings:
        settings['table_prefix'] = str(settings['table_prefix'])

    config = AnonymizeConfig(**settings)
    config.validate()
    return config
