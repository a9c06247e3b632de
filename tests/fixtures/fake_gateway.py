"""
In-memory stand-in for StoreGateway.

Records every statement it receives and fails on request, so engine tests can
assert exactly which statements reached the store.
"""

from dbanon.session import QueryResult, StatementResult


class FakeGateway:
    """
    Fake store gateway.

    Args:
        rows: Rows returned by every read query
        query_error: If set, every read query fails with this message
        fail_on: 1-based index of the write call that fails
        error: Message returned by the failing write
        rowcounts: Row counts returned by successive writes (default 1 each)
        tables: Table names reported as existing
        dialect_name: SQLAlchemy dialect name reported to statement builders
    """

    database_name = 'wordpress'

    def __init__(self, rows=None, query_error=None, fail_on=None,
                 error="Table 'wordpress.wp_postmeta' doesn't exist",
                 rowcounts=None, tables=(), dialect_name='mysql'):
        self.dialect_name = dialect_name
        self.rows = [(1,)] if rows is None else rows
        self.query_error = query_error
        self.fail_on = fail_on
        self.error = error
        self.rowcounts = list(rowcounts or [])
        self.tables = set(tables)
        self.executed = []
        self.queries = []

    def query(self, statement):
        self.queries.append(statement)
        if self.query_error is not None:
            return QueryResult(error=self.query_error)
        return QueryResult(rows=list(self.rows))

    def execute(self, statement):
        self.executed.append(statement)
        index = len(self.executed)
        if self.fail_on is not None and index == self.fail_on:
            return StatementResult(error=self.error)
        if index <= len(self.rowcounts):
            return StatementResult(rowcount=self.rowcounts[index - 1])
        return StatementResult(rowcount=1)

    def has_table(self, table_name):
        return table_name in self.tables
