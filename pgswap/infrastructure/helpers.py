# ============================================================================
# TABLE HELPERS
# ============================================================================
# STATUS: Infrastructure - Convenience operations on named relations
# PURPOSE: One-call index/column/schema/table maintenance by name
# CREATED: 18 OCT 2026
# EXPORTS: add_index, add_column, drop_table, create_schema
# ============================================================================
"""
Table Helpers

Thin wrappers for maintenance scripts that know a relation by name rather
than holding a Table descriptor.
"""

import logging
from typing import Sequence, Union

from pgswap.core.errors import NotFoundError
from pgswap.core.models.column import Column
from pgswap.core.models.index import Index
from pgswap.core.models.table import Table
from pgswap.core.schema import sql_builder

logger = logging.getLogger(__name__)


def add_index(
    connection,
    schema: str,
    table_name: str,
    column_names: Union[str, Sequence[str]],
    **options,
) -> Index:
    """
    Create an index on an existing table unless one on the same columns exists.

    Args:
        options: name, primary, unique, where (see Index)

    Raises:
        NotFoundError: If the table does not exist
    """
    table = Table.fetch(connection, table_name, schema)
    if table is None:
        raise NotFoundError(
            f"Cannot index {schema}.{table_name}: table does not exist",
            relation=table_name,
            schema=schema,
        )

    index = Index(table, column_names, **options)
    if index.exists():
        logger.info(f"{table.qualified_name} already has an index on {', '.join(index.column_names)}")
    else:
        index.create()
    return index


def drop_table(connection, schema: str, table_name: str, *, check_exists: bool = False) -> None:
    connection.exec_drop_table(table_name, schema=schema, check_exists=check_exists)


def add_column(connection, table: Table, column: Column) -> None:
    """ALTER TABLE ... ADD COLUMN for a table descriptor."""
    connection.exec_and_log(sql_builder.add_column(table.name, column, schema=table.schema))


def create_schema(connection, schema: str) -> None:
    """Create the schema if it does not exist yet."""
    if connection.schema_exists(schema):
        return
    logger.info(f"Creating schema {schema}")
    connection.exec_and_log(sql_builder.create_schema(schema))


__all__ = [
    "add_index",
    "add_column",
    "drop_table",
    "create_schema",
]
