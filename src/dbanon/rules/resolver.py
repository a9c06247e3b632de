"""
Rule resolution.

Turns the operator's intent (which groups are enabled, which custom field
prefixes were given) into a concrete, ordered list of rules. Resolution is
pure: it never touches the database and never fails. Problems surface when
the rules are executed.
"""
import dataclasses
import logging
from typing import FrozenSet, Iterable, List, Set

from dbanon.exceptions import ConfigError
from dbanon.rules import groups
from dbanon.rules.models import Rule, RuleGroup
from dbanon.rules.statements import IDENTIFIER_PATTERN

logger = logging.getLogger(__name__)


def parse_custom_fields(raw: str) -> List[str]:
    """
    Split a comma-separated list of field name prefixes.

    Whitespace around each segment is stripped and empty segments are
    dropped, so ``" a, ,b "`` yields ``['a', 'b']`` and ``""`` yields ``[]``.
    """
    if not raw:
        return []
    segments = [segment.strip() for segment in raw.split(',')]
    return [segment for segment in segments if segment]


def normalize_groups(enabled_groups: Iterable[str]) -> Set[str]:
    """Expand aliases ('commerce', 'core') and drop unknown group names."""
    names = set()
    for name in enabled_groups or ():
        if name in groups.GROUP_ALIASES:
            names.update(groups.GROUP_ALIASES[name])
        elif name in groups.GROUP_ORDER:
            names.add(name)
        else:
            logger.warning(f"Ignoring unknown rule group: {name}")
    return names


class RuleResolver:
    """Expand enabled rule groups into concrete rules for one installation."""

    def __init__(self, table_prefix: str = 'wp_', excluded_ids: Iterable[int] = groups.DEFAULT_EXCLUDED_IDS):
        """
        Args:
            table_prefix: Prefix substituted into every table name
            excluded_ids: User IDs the identity rules leave untouched
        """
        if table_prefix and not IDENTIFIER_PATTERN.match(table_prefix):
            raise ConfigError(f"Invalid table prefix: {table_prefix!r}")
        self.table_prefix = table_prefix
        self.excluded_ids: FrozenSet[int] = frozenset(excluded_ids)

    def _prefixed(self, rules: Iterable[Rule]) -> List[Rule]:
        return [dataclasses.replace(rule, table=f"{self.table_prefix}{rule.table}") for rule in rules]

    def groups(self, enabled_groups: Iterable[str], custom_fields: str = '') -> List[RuleGroup]:
        """
        Build every rule group, flagged enabled or not, in expansion order.

        The custom group is enabled exactly when prefixes were given; an empty
        prefix list makes it a no-op rather than an error.
        """
        enabled = normalize_groups(enabled_groups)
        prefixes = parse_custom_fields(custom_fields)

        templates = {
            groups.IDENTITY: groups.identity_rules(self.excluded_ids),
            groups.COMMERCE_BILLING: groups.commerce_billing_rules(),
            groups.COMMERCE_SHIPPING: groups.commerce_shipping_rules(),
            groups.CUSTOM: tuple(groups.custom_field_rule(prefix) for prefix in prefixes),
        }

        result = []
        for name in groups.GROUP_ORDER:
            rules = tuple(self._prefixed(templates[name]))
            requested = name in enabled or name == groups.CUSTOM
            result.append(RuleGroup(name=name, rules=rules, enabled=requested and bool(rules)))
        return result

    def resolve(self, enabled_groups: Iterable[str], custom_fields: str = '') -> List[Rule]:
        """
        Resolve enabled groups into an ordered rule list.

        Args:
            enabled_groups: Names of enabled groups (aliases allowed)
            custom_fields: Comma-separated user meta key prefixes

        Returns:
            Rules ordered identity, commerce-billing, commerce-shipping,
            custom, regardless of the order groups were given in.
        """
        rules: List[Rule] = []
        for group in self.groups(enabled_groups, custom_fields):
            if group.enabled:
                rules.extend(group.rules)

        logger.debug(f"Resolved {len(rules)} rules")
        return rules
