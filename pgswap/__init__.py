# ============================================================================
# PGSWAP
# ============================================================================
# STATUS: Package initialization
# PURPOSE: PostgreSQL table descriptors with transactional hotswap
# CREATED: 18 OCT 2026
# ============================================================================
"""
pgswap - rebuild PostgreSQL tables offline and swap them in atomically.

Usage:
    from pgswap import Table, connection_scope

    with connection_scope() as connection:
        table = Table.load("countries", connection=connection)
        table.insert_through_temp_table(rows)
"""

from pgswap.__version__ import __version__
from pgswap.core import (
    Column,
    DatabaseError,
    Index,
    InvalidArgumentError,
    NotConnectedError,
    NotFoundError,
    PgSwapError,
    Table,
    TableSpec,
    TempTableError,
    get_defaults,
    sql_builder,
)
from pgswap.core.logging import configure_logging
from pgswap.infrastructure import Connection, connection_scope

__all__ = [
    "__version__",
    "Column",
    "Index",
    "Table",
    "TableSpec",
    "Connection",
    "connection_scope",
    "configure_logging",
    "get_defaults",
    "sql_builder",
    "PgSwapError",
    "InvalidArgumentError",
    "NotFoundError",
    "DatabaseError",
    "NotConnectedError",
    "TempTableError",
]
