"""
Built-in rule groups for WordPress and WooCommerce databases.

Table names here are unprefixed; the resolver applies the installation's
table prefix. Groups are listed in the order they are always expanded in.
"""
from typing import FrozenSet, Tuple

from dbanon.rules.models import Exclusion, KeyFilter, Placeholder, RandomNumber, Rule

IDENTITY = 'identity'
COMMERCE_BILLING = 'commerce-billing'
COMMERCE_SHIPPING = 'commerce-shipping'
CUSTOM = 'custom'

# Fixed expansion order, independent of the order groups are requested in
GROUP_ORDER = (IDENTITY, COMMERCE_BILLING, COMMERCE_SHIPPING, CUSTOM)

# The 'commerce' toggle switches on both WooCommerce groups
GROUP_ALIASES = {
    'core': (IDENTITY,),
    'commerce': (COMMERCE_BILLING, COMMERCE_SHIPPING),
    'woocommerce': (COMMERCE_BILLING, COMMERCE_SHIPPING),
}

DEFAULT_EXCLUDED_IDS: FrozenSet[int] = frozenset({1})

USER_NAME_META_KEYS = ('nickname', 'first_name', 'last_name')


def identity_rules(excluded_ids: FrozenSet[int] = DEFAULT_EXCLUDED_IDS) -> Tuple[Rule, ...]:
    """
    Core WordPress user fields: login names, profile names and emails.

    Args:
        excluded_ids: User IDs to leave untouched (the first admin by default)
    """
    return (
        Rule(
            name='users.identity',
            scope=IDENTITY,
            table='users',
            columns=('user_login', 'user_nicename', 'display_name'),
            strategy=Placeholder(),
            exclusion=Exclusion('ID', frozenset(excluded_ids)),
        ),
        Rule(
            name='usermeta.names',
            scope=IDENTITY,
            table='usermeta',
            columns=('meta_value',),
            strategy=Placeholder(),
            key_filter=KeyFilter('meta_key', USER_NAME_META_KEYS),
            exclusion=Exclusion('user_id', frozenset(excluded_ids)),
        ),
        Rule(
            name='users.email',
            scope=IDENTITY,
            table='users',
            columns=('user_email',),
            strategy=RandomNumber(),
            exclusion=Exclusion('ID', frozenset(excluded_ids)),
        ),
    )


def _meta_prefix_rule(name: str, scope: str, table: str, prefix: str) -> Rule:
    return Rule(
        name=name,
        scope=scope,
        table=table,
        columns=('meta_value',),
        strategy=Placeholder(),
        key_filter=KeyFilter('meta_key', (prefix,), mode='prefix'),
    )


def commerce_billing_rules() -> Tuple[Rule, ...]:
    """Billing addresses on customer accounts and on orders."""
    return (
        _meta_prefix_rule('usermeta.billing', COMMERCE_BILLING, 'usermeta', 'billing_'),
        _meta_prefix_rule('postmeta.billing', COMMERCE_BILLING, 'postmeta', '_billing_'),
    )


def commerce_shipping_rules() -> Tuple[Rule, ...]:
    """Shipping addresses on customer accounts and on orders."""
    return (
        _meta_prefix_rule('usermeta.shipping', COMMERCE_SHIPPING, 'usermeta', 'shipping_'),
        _meta_prefix_rule('postmeta.shipping', COMMERCE_SHIPPING, 'postmeta', '_shipping_'),
    )


def custom_field_rule(prefix: str) -> Rule:
    """User meta whose key starts with an operator-supplied prefix."""
    return _meta_prefix_rule(f"usermeta.custom[{prefix}]", CUSTOM, 'usermeta', prefix)
