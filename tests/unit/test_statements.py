"""
Unit tests for SQL statement construction.
"""
import pytest

from dbanon.exceptions import ConfigError
from dbanon.rules import FixedValue, KeyFilter, Rule, RuleResolver, build_statement
from dbanon.rules.statements import precondition_statement


@pytest.fixture
def rules():
    return {r.name: r for r in RuleResolver().resolve(['identity', 'commerce'], 'loyalty_')}


class TestBuildStatement:
    """Test the statements generated for the built-in rules."""

    def test_user_identity_statement(self, rules):
        statement = build_statement(rules['users.identity'])

        assert statement.sql == (
            "UPDATE wp_users SET user_login = :value, user_nicename = :value, "
            "display_name = :value WHERE ID NOT IN :excluded_ids"
        )
        assert statement.params == {'value': 'xxxxxxxx', 'excluded_ids': [1]}
        assert statement.expanding == ('excluded_ids',)

    def test_user_name_meta_statement(self, rules):
        statement = build_statement(rules['usermeta.names'])

        assert statement.sql == (
            "UPDATE wp_usermeta SET meta_value = :value "
            "WHERE meta_key IN :key_values AND user_id NOT IN :excluded_ids"
        )
        assert statement.params['key_values'] == ['nickname', 'first_name', 'last_name']
        assert statement.params['excluded_ids'] == [1]

    def test_email_statement_mysql(self, rules):
        statement = build_statement(rules['users.email'], 'mysql')

        assert statement.sql == (
            "UPDATE wp_users SET user_email = CONCAT(FLOOR(RAND() * :span + :low), :suffix) "
            "WHERE ID NOT IN :excluded_ids"
        )
        assert statement.params['span'] == 90000
        assert statement.params['low'] == 10000
        assert statement.params['suffix'] == '@localhost.dev'

    def test_email_statement_sqlite(self, rules):
        statement = build_statement(rules['users.email'], 'sqlite')
        assert "(ABS(RANDOM()) % :span + :low) || :suffix" in statement.sql

    def test_random_on_unsupported_dialect(self, rules):
        with pytest.raises(ConfigError, match="not supported"):
            build_statement(rules['users.email'], 'mssql')

    def test_commerce_statement(self, rules):
        statement = build_statement(rules['postmeta.billing'])

        assert statement.sql == "UPDATE wp_postmeta SET meta_value = :value WHERE meta_key LIKE :pattern"
        assert statement.params == {'value': 'xxxxxxxx', 'pattern': '_billing_%'}
        assert statement.expanding == ()

    def test_custom_prefix_is_bound_not_interpolated(self):
        hostile = "x' OR '1'='1"
        rule = RuleResolver().resolve([], hostile)[0]
        statement = build_statement(rule)

        assert hostile not in statement.sql
        assert statement.params['pattern'] == hostile + '%'

    def test_exclusion_ids_sorted(self):
        rule = RuleResolver(excluded_ids=[9, 2, 5]).resolve(['identity'])[0]
        assert build_statement(rule).params['excluded_ids'] == [2, 5, 9]

    def test_no_where_clause_without_filters(self):
        rule = Rule(name='t', scope='test', table='wp_users', columns=('display_name',),
                    strategy=FixedValue('anon'))
        statement = build_statement(rule)

        assert statement.sql == "UPDATE wp_users SET display_name = :value"
        assert statement.params == {'value': 'anon'}

    def test_invalid_column_rejected(self):
        rule = Rule(name='t', scope='test', table='wp_users', columns=('name; DROP',),
                    strategy=FixedValue('anon'))
        with pytest.raises(ConfigError):
            build_statement(rule)


class TestKeyFilter:

    def test_prefix_mode_takes_one_value(self):
        with pytest.raises(ValueError):
            KeyFilter('meta_key', ('a', 'b'), mode='prefix')

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            KeyFilter('meta_key', ('a',), mode='regex')


def test_precondition_statement():
    assert precondition_statement('wp_').sql == "SELECT 1 FROM wp_users LIMIT 1"
