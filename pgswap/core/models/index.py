# ============================================================================
# INDEX MODEL
# ============================================================================
# STATUS: Core model - Index descriptor
# PURPOSE: Index identity, generated naming, equivalence, and DDL operations
# CREATED: 18 OCT 2026
# EXPORTS: Index
# ============================================================================
"""
Index Model

An Index belongs to exactly one Table (a back-reference, not ownership).

Naming:
    Without an explicit name, an index is named
    idx_<table base name>_on_<first column>[_<position>...], where each
    additional column contributes its 1-based position in the table's
    column list. Indexes of a temp table get a temp_ prefix:

        columns (wei_column, mike_column) on diego_table
            -> idx_diego_table_on_wei_column_2
            -> temp_idx_diego_table_on_wei_column_2   (temp table)

Equivalence:
    Two indexes are equivalent when they sit on the same table base name
    and schema, cover the same columns in the same order, and agree on the
    primary and unique flags. Names are ignored. Equality additionally
    requires the same effective name.
"""

import time
from typing import Any, Dict, Optional, Sequence, Union

from pgswap.core.errors import InvalidArgumentError, NotFoundError
from pgswap.core.logging import get_logger

logger = get_logger(__name__)


class Index:
    """
    Desired or materialized index on a Table.

    Args:
        table: Owning Table
        column_names: Column names or expressions, in index order
        name: Explicit name; generated when omitted
        primary: Promote to the table's primary key after creation
        unique: Create a UNIQUE index (implied by primary)
        where: Predicate for a partial index
    """

    def __init__(
        self,
        table,
        column_names: Union[str, Sequence[str]],
        *,
        name: Optional[str] = None,
        primary: bool = False,
        unique: bool = False,
        where: Optional[str] = None,
    ):
        from pgswap.core.models.table import Table

        if table is None or not isinstance(table, Table):
            raise InvalidArgumentError(f"Not a table: {table!r}", field="table", value=table)

        if isinstance(column_names, str):
            column_names = [column_names]
        column_names = tuple(column_names or ())
        if not column_names:
            raise InvalidArgumentError(
                f"Index on {table.qualified_name} needs at least one column",
                field="column_names",
            )

        self.table = table
        self.column_names = column_names
        self.explicit_name = name
        self.where = where
        self._primary = bool(primary)
        self._unique = bool(unique)
        # explicit_name is used as-is, even on a temp table
        self._verbatim = False

    @classmethod
    def _materialized(cls, table, index_name: str, column_names, **options) -> "Index":
        """Descriptor whose effective name is exactly index_name."""
        prefix = table.temp_prefix
        if table.temp and index_name.startswith(prefix):
            return cls(table, column_names, name=index_name[len(prefix):], **options)
        index = cls(table, column_names, name=index_name, **options)
        index._verbatim = table.temp
        return index

    @classmethod
    def fetch(cls, connection, table, index_name: str) -> "Index":
        """
        Build an Index from the catalog.

        Raises:
            NotFoundError: If no such index exists in the table's schema
        """
        info = connection.fetch_index_info(index_name, table.schema)
        if info is None:
            raise NotFoundError(
                f"Index {index_name} does not exist in schema {table.schema}",
                relation=index_name,
                schema=table.schema,
            )
        column_names = connection.fetch_index_column_names(info["oid"])
        return cls._materialized(
            table,
            index_name,
            column_names,
            unique=info["unique"],
            primary=info["primary"],
        )

    # =========================================================================
    # IDENTITY
    # =========================================================================

    @property
    def primary(self) -> bool:
        return self._primary

    @property
    def unique(self) -> bool:
        return self._unique or self._primary

    @property
    def schema(self) -> str:
        return self.table.schema

    @property
    def generated_name(self) -> Optional[str]:
        """
        Deterministic name derived from the table and column positions.

        None when an additional column is not one of the table's columns
        (e.g. an expression), in which case an explicit name is required.
        """
        table_columns = self.table.column_names
        name = f"idx_{self.table.base_name}_on_{self.column_names[0]}"
        for column_name in self.column_names[1:]:
            if column_name not in table_columns:
                return None
            name += f"_{table_columns.index(column_name) + 1}"
        return name

    @property
    def name(self) -> str:
        base_name = self.explicit_name or self.generated_name
        if base_name is None:
            raise InvalidArgumentError(
                f"Index on {self.table.qualified_name} ({', '.join(self.column_names)}) "
                "covers a non-column expression and needs an explicit name",
                field="name",
            )
        if self.table.temp and not self._verbatim:
            return f"{self.table.temp_prefix}{base_name}"
        return base_name

    @property
    def qualified_name(self) -> str:
        return f'"{self.schema}"."{self.name}"'

    def equivalent(self, other: Any) -> bool:
        """Structural comparison ignoring names."""
        if not isinstance(other, Index):
            return False
        return (
            self.table.base_name == other.table.base_name
            and self.schema == other.schema
            and self.column_names == other.column_names
            and self.primary == other.primary
            and self.unique == other.unique
        )

    def __eq__(self, other: Any) -> bool:
        if not self.equivalent(other):
            return False
        return self.name == other.name

    __hash__ = None

    def __repr__(self) -> str:
        flags = " primary" if self.primary else (" unique" if self.unique else "")
        label = self.explicit_name or self.generated_name
        return f"<Index {label} on {self.table.base_name}({', '.join(self.column_names)}){flags}>"

    # =========================================================================
    # COPIES
    # =========================================================================

    def copy_for(self, table, *, keep_name: bool = True) -> "Index":
        """Return an independent copy owned by `table`."""
        copy = Index(
            table,
            self.column_names,
            name=self.explicit_name if keep_name else None,
            primary=self._primary,
            unique=self._unique,
            where=self.where,
        )
        copy._verbatim = keep_name and self._verbatim and table.temp == self.table.temp
        return copy

    # =========================================================================
    # DATABASE OPERATIONS
    # =========================================================================

    def exists(self) -> bool:
        """True when the table has a materialized index on the same columns."""
        return any(index.column_names == self.column_names for index in self.table.fetch_indexes())

    def create(self) -> None:
        """
        Create the index, replacing any same-named index.

        A primary index is promoted to the table's primary key afterwards.
        """
        connection = self.table.connection
        where = f" WHERE {self.where}" if self.where else ""
        logger.info(
            f"Indexing {self.table.qualified_name} on {', '.join(self.column_names)} ({self.name}){where}"
        )

        if connection.index_exists(self.name, self.schema):
            logger.info(f"Index {self.name} already exists. Dropping")
            self.drop()

        start_time = time.monotonic()
        connection.exec_create_index(
            self.name,
            self.table.name,
            schema=self.schema,
            unique=self.unique,
            columns=self.column_names,
            where=self.where,
        )

        if self.primary:
            connection.exec_alter_table(self.table.name, schema=self.schema, primary_index=self.name)

        logger.info(f"Indexing completed in {time.monotonic() - start_time:.2f} seconds")

    def drop(self, *, check_exists: bool = False) -> None:
        self.table.connection.exec_drop_index(self.name, schema=self.schema, check_exists=check_exists)

    def rename(self, new_name: str) -> "Index":
        """
        Rename the materialized index.

        Returns:
            A new Index carrying new_name; this descriptor is unchanged
        """
        self.table.connection.exec_alter_index(self.name, schema=self.schema, rename_to=new_name)
        return Index._materialized(
            self.table,
            new_name,
            self.column_names,
            primary=self._primary,
            unique=self._unique,
            where=self.where,
        )

    def to_descriptor(self) -> Dict[str, Any]:
        """Minimal dict form; the name is kept only when it is not the generated one."""
        descriptor: Dict[str, Any] = {
            "table_name": self.table.name,
            "schema": self.schema,
            "columns": list(self.column_names),
        }
        if self.primary:
            descriptor["primary"] = True
        elif self.unique:
            descriptor["unique"] = True
        if self.explicit_name and self.explicit_name != self.generated_name:
            descriptor["name"] = self.explicit_name
        if self.where:
            descriptor["where"] = self.where
        return descriptor


__all__ = ["Index"]
