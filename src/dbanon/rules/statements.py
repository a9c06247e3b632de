"""
Build SQL statements for resolved rules.

Every value that can be influenced by the operator (placeholder text, key
prefixes, excluded IDs) is passed as a bound parameter. Table and column
names cannot be bound, so they are checked against a strict identifier
pattern instead.
"""
import re
from typing import Any, Dict, List

from dbanon.exceptions import ConfigError
from dbanon.rules.models import FixedValue, RandomNumber, Rule
from dbanon.session.gateway import Statement

IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z0-9_]+$')

# Random number expressions per SQL dialect. MySQL and MariaDB share one.
RANDOM_EXPRESSIONS = {
    'mysql': "CONCAT(FLOOR(RAND() * :span + :low), :suffix)",
    'mariadb': "CONCAT(FLOOR(RAND() * :span + :low), :suffix)",
    'sqlite': "(ABS(RANDOM()) % :span + :low) || :suffix",
}


def check_identifier(name: str) -> str:
    """Return ``name`` unchanged if it is safe to use as a table or column name."""
    if not IDENTIFIER_PATTERN.match(name or ''):
        raise ConfigError(f"Invalid SQL identifier: {name!r}")
    return name


def _value_expression(rule: Rule, dialect_name: str, params: Dict[str, Any]) -> str:
    strategy = rule.strategy
    if isinstance(strategy, FixedValue):
        params['value'] = strategy.value
        return ':value'

    if isinstance(strategy, RandomNumber):
        try:
            expression = RANDOM_EXPRESSIONS[dialect_name]
        except KeyError:
            raise ConfigError(f"Random values are not supported on the {dialect_name} dialect")
        params.update(span=strategy.span, low=strategy.low, suffix=strategy.suffix)
        return expression

    raise TypeError(f"Unknown strategy: {strategy!r}")


def build_statement(rule: Rule, dialect_name: str = 'mysql') -> Statement:
    """
    Build the UPDATE statement implied by a rule.

    Args:
        rule: Resolved rule (table name already prefixed)
        dialect_name: SQLAlchemy dialect name of the target database

    Returns:
        Statement with SQL text and bound parameters

    Example:
        UPDATE wp_users SET user_login = :value, user_nicename = :value,
        display_name = :value WHERE ID NOT IN :excluded_ids
    """
    params: Dict[str, Any] = {}
    expanding: List[str] = []

    expression = _value_expression(rule, dialect_name, params)
    assignments = ', '.join(f"{check_identifier(column)} = {expression}" for column in rule.columns)

    conditions = []
    key_filter = rule.key_filter
    if key_filter is not None:
        column = check_identifier(key_filter.column)
        if key_filter.mode == 'prefix':
            conditions.append(f"{column} LIKE :pattern")
            params['pattern'] = f"{key_filter.values[0]}%"
        else:
            conditions.append(f"{column} IN :key_values")
            params['key_values'] = list(key_filter.values)
            expanding.append('key_values')

    if rule.exclusion:
        conditions.append(f"{check_identifier(rule.exclusion.column)} NOT IN :excluded_ids")
        params['excluded_ids'] = sorted(rule.exclusion.ids)
        expanding.append('excluded_ids')

    sql = f"UPDATE {check_identifier(rule.table)} SET {assignments}"
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    return Statement(sql=sql, params=params, expanding=tuple(expanding))


def precondition_statement(table_prefix: str) -> Statement:
    """Read required before any mutation: the users table must have rows."""
    return Statement(sql=f"SELECT 1 FROM {check_identifier(table_prefix + 'users')} LIMIT 1")


def site_url_statement(table_prefix: str) -> Statement:
    """Read the site URL shown in the confirmation prompt."""
    return Statement(
        sql=f"SELECT option_value FROM {check_identifier(table_prefix + 'options')} WHERE option_name = :name",
        params={'name': 'siteurl'}
    )
