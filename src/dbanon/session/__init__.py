"""Database connection setup and the store gateway."""

from dbanon.session.gateway import (
    StoreGateway,
    Statement,
    StatementResult,
    QueryResult,
    create_anon_engine,
)

__all__ = [
    'StoreGateway',
    'Statement',
    'StatementResult',
    'QueryResult',
    'create_anon_engine',
]
