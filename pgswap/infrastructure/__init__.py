# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database operations
# PURPOSE: PostgreSQL connection, catalog introspection, and table helpers
# CREATED: 18 OCT 2026
# ============================================================================
"""
Infrastructure module for pgswap.

Provides:
- Connection: psycopg session with the statement error policy
- connection_scope: Connection that is always closed
- add_index / add_column / drop_table / create_schema: maintenance helpers

Usage:
    from pgswap.infrastructure import connection_scope, add_index

    with connection_scope() as connection:
        add_index(connection, "reporting", "countries", ["iso_code"], unique=True)
"""

from pgswap.infrastructure.catalog import CatalogQueries
from pgswap.infrastructure.postgresql import (
    Connection,
    connection_scope,
)
from pgswap.infrastructure.helpers import (
    add_index,
    add_column,
    drop_table,
    create_schema,
)

__all__ = [
    "CatalogQueries",
    "Connection",
    "connection_scope",
    "add_index",
    "add_column",
    "drop_table",
    "create_schema",
]
