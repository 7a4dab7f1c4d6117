# ============================================================================
# TABLE MODEL
# ============================================================================
# STATUS: Core model - Table descriptor and lifecycle
# PURPOSE: Columns, desired indexes, DDL/DML operations, and hotswap
# CREATED: 18 OCT 2026
# EXPORTS: Table
# DEPENDENCIES: pydantic (via Column/TableSpec)
# ============================================================================
"""
Table Model

A Table describes one relation: base name, schema, ordered columns and
desired indexes. I/O goes through a borrowed Connection, which the table
never closes.

Temp tables:
    A temp table is a clone flagged to live under temp_<base_name>. Clones
    copy every index and re-point the copies at the clone, so changing a
    clone's indexes never touches the original.

Hotswap:
    1. Prepare temp_<name> (create, load, index, analyze) while the live
       table stays readable.
    2. In one transaction: drop the live table, rename each temp index to
       the name the live index at the same position would have, rename
       the temp table to the live name, rename serial sequences that still
       carry the temp name.
    3. Commit. Any failure rolls the whole transaction back and the live
       table is untouched.

Usage:
    table = Table.load("countries", connection=connection)
    table.insert_through_temp_table(rows)
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from pgswap.core.config import get_defaults
from pgswap.core.errors import InvalidArgumentError, NotConnectedError, TempTableError
from pgswap.core.logging import get_logger, log_context
from pgswap.core.models.column import Column, inject_raw_columns
from pgswap.core.models.index import Index
from pgswap.core.models.spec import IndexSpec, TableSpec
from pgswap.core.schema import sql_builder

logger = get_logger(__name__)

IndexDescriptor = Union[Index, Mapping[str, Any]]
Row = Union[Mapping[str, Any], Sequence[Sequence[Any]]]


class Table:
    """
    Table descriptor bound (optionally) to a connection.

    Args:
        base_name: Table name without the temp prefix
        schema: Schema name (default from TableDefaults, "reporting")
        columns: Column objects or descriptor dicts
        indexes: Index objects or descriptor dicts
        temp: Materialize under the temp_ prefixed name
        unlogged: Create as UNLOGGED (default from TableDefaults, True)
        connection: Borrowed pgswap Connection
    """

    def __init__(
        self,
        base_name: str,
        *,
        schema: Optional[str] = None,
        columns: Iterable[Union[Column, Mapping[str, Any]]] = (),
        indexes: Iterable[IndexDescriptor] = (),
        temp: bool = False,
        unlogged: Optional[bool] = None,
        connection=None,
    ):
        if not base_name:
            raise InvalidArgumentError("A table needs a name", field="base_name", value=base_name)

        defaults = get_defaults().tables
        self._base_name = base_name
        self.schema = schema or defaults.schema
        self.columns: List[Column] = [Column.coerce(c) for c in columns or ()]
        self._temp = bool(temp)
        self.unlogged = defaults.unlogged if unlogged is None else bool(unlogged)
        self._connection = connection
        self.indexes = indexes

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_spec(
        cls,
        spec: Union[TableSpec, Mapping[str, Any]],
        *,
        table_name: Optional[str] = None,
        **overrides,
    ) -> "Table":
        """
        Build a table from a stored specification.

        Keyword overrides (schema, columns, indexes, temp, unlogged,
        connection) win over the specification.
        """
        if not isinstance(spec, TableSpec):
            spec = TableSpec.from_dict(dict(spec))

        options: Dict[str, Any] = {
            "schema": spec.schema_name,
            "columns": spec.columns,
            "indexes": [index.model_dump() for index in spec.indexes],
            "unlogged": spec.unlogged,
            "temp": spec.temp,
        }
        options.update(overrides)
        return cls(spec.table_name or table_name, **options)

    @classmethod
    def load(cls, table_name: str, *, path: Union[str, Path, None] = None, **overrides) -> "Table":
        """
        Load <path>/<table_name>.json.

        Raises:
            NotFoundError: If the specification file does not exist
        """
        directory = Path(path or get_defaults().tables.table_path)
        spec = TableSpec.from_file(directory / f"{table_name}.json")
        return cls.from_spec(spec, table_name=table_name, **overrides)

    @classmethod
    def fetch(cls, connection, table_name: str, schema: Optional[str] = None) -> Optional["Table"]:
        """
        Build a table from the live database.

        UNLOGGED-ness is not introspected.

        Returns:
            The table with its materialized indexes, or None (logged) if the
            schema or table does not exist
        """
        schema = schema or get_defaults().tables.schema

        if not connection.schema_exists(schema):
            logger.error(f"Schema {schema} does not exist")
            return None

        table = cls(
            table_name,
            schema=schema,
            columns=cls.fetch_columns(connection, table_name, schema),
            connection=connection,
        )

        if not table.exists():
            logger.error(f"Table {table.qualified_name} does not exist")
            return None

        table.indexes = table.fetch_indexes()
        return table

    @staticmethod
    def fetch_columns(connection, table_name: str, schema: str) -> List[Column]:
        return [Column.coerce(row) for row in connection.fetch_columns(table_name, schema)]

    # =========================================================================
    # IDENTITY
    # =========================================================================

    @property
    def base_name(self) -> str:
        return self._base_name

    @property
    def temp(self) -> bool:
        return self._temp

    @property
    def temp_prefix(self) -> str:
        return get_defaults().tables.temp_prefix

    @property
    def temp_name(self) -> str:
        return f"{self.temp_prefix}{self.base_name}"

    @property
    def name(self) -> str:
        return self.temp_name if self.temp else self.base_name

    @property
    def qualified_name(self) -> str:
        return sql_builder.qualified_relation_name(self.name, self.schema)

    @property
    def connection(self):
        if self._connection is None:
            raise NotConnectedError(f"Table {self.qualified_name} does not have an open connection")
        return self._connection

    @connection.setter
    def connection(self, connection) -> None:
        self._connection = connection

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def columns_with_raw_columns(self) -> List[Column]:
        return inject_raw_columns(self.columns)

    @property
    def column_names_with_raw_columns(self) -> List[str]:
        return [column.name for column in self.columns_with_raw_columns]

    @property
    def indexes(self) -> List[Index]:
        return self._indexes

    @indexes.setter
    def indexes(self, index_array: Iterable[IndexDescriptor]) -> None:
        self._indexes = [self._coerce_index(descriptor) for descriptor in index_array or ()]

    def _coerce_index(self, descriptor: IndexDescriptor) -> Index:
        if isinstance(descriptor, Index):
            return descriptor if descriptor.table is self else descriptor.copy_for(self)
        if isinstance(descriptor, Mapping):
            try:
                spec = IndexSpec.model_validate(dict(descriptor))
            except ValidationError as e:
                raise InvalidArgumentError(f"Invalid index descriptor {dict(descriptor)!r}: {e}", value=descriptor) from e
            return Index(
                self,
                spec.columns,
                name=spec.name,
                primary=spec.primary,
                unique=spec.unique,
                where=spec.where,
            )
        raise InvalidArgumentError(f"Not an index descriptor: {descriptor!r}", field="indexes", value=descriptor)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Table):
            return False
        return (
            self.base_name == other.base_name
            and self.schema == other.schema
            and self.temp == other.temp
            and self.unlogged == other.unlogged
            and self.columns == other.columns
            and self.indexes == other.indexes
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"<Table {self.qualified_name} columns={len(self.columns)} indexes={len(self.indexes)}>"

    # =========================================================================
    # COPIES
    # =========================================================================

    def _copy(self, *, base_name: Optional[str] = None, temp: Optional[bool] = None,
              keep_index_names: bool = True) -> "Table":
        table = Table(
            base_name or self.base_name,
            schema=self.schema,
            columns=list(self.columns),
            temp=self.temp if temp is None else temp,
            unlogged=self.unlogged,
            connection=self._connection,
        )
        table.indexes = [index.copy_for(table, keep_name=keep_index_names) for index in self.indexes]
        return table

    def get_temp_table(self) -> "Table":
        """Independent temp clone: same columns and index descriptors, temp=True."""
        return self._copy(temp=True)

    @contextmanager
    def with_temp_table(self):
        yield self.get_temp_table()

    def clone_rename(self, new_name: str) -> "Table":
        """Independent copy under new_name; explicit index names are dropped and regenerated."""
        return self._copy(base_name=new_name, keep_index_names=False)

    def without_sequences(self) -> "Table":
        """Copy whose columns no longer default to nextval(...::regclass)."""
        table = self._copy()
        table.columns = [c.without_default() if c.has_sequence_default else c for c in self.columns]
        return table

    @contextmanager
    def with_connection(self, **options):
        """
        Bind a scoped connection for the duration of the block.

        Yields:
            (table, connection); the connection is closed and unbound on exit
        """
        from pgswap.infrastructure.postgresql import connection_scope

        with connection_scope(**options) as connection:
            self.connection = connection
            try:
                yield self, connection
            finally:
                self.connection = None

    # =========================================================================
    # DDL
    # =========================================================================

    def create(self, *, force: bool = False, like: Optional[str] = None) -> None:
        """
        CREATE TABLE with raw sibling columns injected.

        Args:
            force: Drop the table first if it exists
            like: Qualified name of a table to clone instead of the column list
        """
        if force:
            self.drop(check_exists=True)
        self.connection.exec_create_table(
            self.name,
            schema=self.schema,
            columns=self.columns_with_raw_columns,
            unlogged=self.unlogged,
            like=like,
        )

    def drop(self, *, check_exists: bool = False) -> None:
        if check_exists and not self.exists():
            return
        self.connection.exec_drop_table(self.name, schema=self.schema, check_exists=check_exists)

    def exists(self) -> bool:
        return self.connection.table_exists(self.name, self.schema)

    def vacuum_analyze(self) -> None:
        self.connection.exec_and_log(sql_builder.vacuum_analyze(self.name, schema=self.schema))

    def to_sql(self) -> str:
        """DDL script for the table, its indexes and its primary key."""
        statements = [
            sql_builder.create_table(
                self.name,
                schema=self.schema,
                columns=self.columns_with_raw_columns,
                unlogged=self.unlogged,
            )
        ]
        for index in self.indexes:
            statements.append(
                sql_builder.create_index(
                    index.name,
                    self.name,
                    schema=self.schema,
                    unique=index.unique,
                    columns=index.column_names,
                    where=index.where,
                )
            )
            if index.primary:
                statements.append(
                    sql_builder.alter_table(self.name, schema=self.schema, primary_index=index.name)
                )
        return "\n".join(statements) + "\n"

    # =========================================================================
    # INDEXES
    # =========================================================================

    def fetch_index_names(self) -> List[str]:
        return self.connection.fetch_index_names(self.name, self.schema)

    def fetch_indexes(self) -> List[Index]:
        """Materialized indexes, read from the catalog on every call."""
        return [Index.fetch(self.connection, self, name) for name in self.fetch_index_names()]

    def create_primary_index(self) -> Optional[Index]:
        primary_index = next((index for index in self.indexes if index.primary), None)
        if primary_index is not None:
            primary_index.create()
        return primary_index

    def create_indexes(self) -> List[Index]:
        """
        Create every desired index that has no equivalent materialized index.

        Returns:
            The indexes that were created (empty when already converged)
        """
        created = []
        with log_context(schema=self.schema, table=self.name, operation="create_indexes"):
            current_indexes = self.fetch_indexes()
            for index in self.indexes:
                if any(current.equivalent(index) for current in current_indexes):
                    logger.debug(f"Skipping {index.name}: an equivalent index exists")
                    continue
                index.create()
                current_indexes.append(index)
                created.append(index)
        return created

    # =========================================================================
    # DML
    # =========================================================================

    @staticmethod
    def _split_row(row: Row):
        pairs = row.items() if isinstance(row, Mapping) else row
        columns, values = [], []
        for column, value in pairs:
            columns.append(str(column))
            values.append(value)
        return columns, values

    def insert(self, rows: Iterable[Row]) -> None:
        """
        INSERT each row with its own parameterized statement.

        A row is a mapping of column -> value or a sequence of
        (column, value) pairs.
        """
        for row in rows or ():
            columns, values = self._split_row(row)
            self.connection.exec_insert_into(self.name, schema=self.schema, columns=columns, params=values)

    def insert_batch(self, columns: Sequence[str], rows: Iterable[Sequence[Any]],
                     batch_size: Optional[int] = None) -> None:
        """
        INSERT value rows in groups, one transaction per group.

        Groups commit independently; a failure leaves every earlier group
        committed.
        """
        rows = list(rows or ())
        if not rows:
            return

        batch_size = batch_size or get_defaults().tables.batch_size
        if batch_size < 1:
            raise InvalidArgumentError(f"batch_size must be positive, got {batch_size}", field="batch_size")

        sql = sql_builder.insert_into(self.name, schema=self.schema, columns=[str(c) for c in columns])
        connection = self.connection
        for start in range(0, len(rows), batch_size):
            with connection.transaction():
                for row in rows[start:start + batch_size]:
                    connection.exec_and_log(sql, list(row))

    def insert_select(self, select_text: str, *, column_names: Optional[Sequence[str]] = None,
                      arguments: Sequence[Any] = ()) -> None:
        """INSERT INTO this table SELECT <select_text>, defaulting to every column incl. raw ones."""
        self.connection.exec_insert_into_select(
            self.name,
            select_text,
            schema=self.schema,
            columns=list(column_names or self.column_names_with_raw_columns),
            params=list(arguments),
        )

    def update(self, rows: Iterable[Row], *, where_clause: Optional[str] = None) -> None:
        for row in rows or ():
            columns, values = self._split_row(row)
            self.connection.exec_update(
                self.name,
                schema=self.schema,
                columns=columns,
                where_clause=where_clause,
                params=values,
            )

    def select(self, where_clause: Optional[str] = None, *params, columns=None,
               order: Optional[str] = None, group: Optional[str] = None,
               having: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        SELECT from this table.

        Positional arguments after the WHERE clause bind to $1, $2, ...
        """
        sql = sql_builder.select(
            self.name,
            schema=self.schema,
            columns=columns,
            where_clause=where_clause,
            order=order,
            group=group,
            having=having,
        )
        return self.connection.exec_and_log(sql, list(params))

    def select_simple(self, column: str, where_clause: Optional[str] = None, *params, **options) -> Any:
        """First column of the first row, or None when nothing matches."""
        rows = self.select(where_clause, *params, columns=column, **options)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    @contextmanager
    def ignoring_duplicates(self, pk_fields: Sequence[str]):
        """
        Silently skip INSERTs whose key already exists, for the block only.

        Installs an ON INSERT ... DO INSTEAD NOTHING rule and drops it on exit.
        """
        rule_name = f"{self.name}_on_duplicate_ignore"
        connection = self.connection
        connection.exec_and_log(
            sql_builder.create_ignore_duplicates_rule(rule_name, self.name, pk_fields, schema=self.schema)
        )
        try:
            yield self
        finally:
            connection.exec_and_log(sql_builder.drop_rule(rule_name, self.name, schema=self.schema))

    # =========================================================================
    # HOTSWAP
    # =========================================================================

    def _require_live(self) -> None:
        if self.temp:
            raise TempTableError(f"{self.qualified_name} is a temp table")

    def create_like_temp_table(self) -> None:
        """Create the live table LIKE its temp table when it does not exist yet."""
        self._require_live()
        if not self.exists():
            self.connection.exec_create_table(
                self.name,
                schema=self.schema,
                like=self.get_temp_table().qualified_name,
            )

    def hotswap(self) -> None:
        """
        Replace the live table with temp_<name> in one transaction.

        Temp indexes are paired with live indexes by position in
        self.indexes, not by equivalence.
        """
        self._require_live()
        temp_table = self.get_temp_table()

        with log_context(schema=self.schema, table=self.base_name, operation="hotswap"):
            self.create_like_temp_table()
            logger.info(f"Swapping {temp_table.qualified_name} into {self.qualified_name}")
            errors_ignored = self.connection.errors_ignored

            with self.connection.transaction():
                self.drop()
                for temp_index, index in zip(temp_table.indexes, self.indexes):
                    temp_index.rename(index.name)
                temp_table.rename_temp_table()
                self.rename_temp_sequences()

            if self.connection.errors_ignored > errors_ignored:
                logger.error(f"Hotswap of {self.qualified_name} rolled back: a statement failed")
            else:
                logger.info(f"Hotswap of {self.qualified_name} committed")

    def hotswap_by_catalog(self, *, skip_sequences: bool = False) -> None:
        """
        Hotswap renaming the temp table's materialized indexes.

        Every index on temp_<name> whose name starts with the temp prefix
        loses the prefix, regardless of the descriptor's index list.
        """
        self._require_live()
        temp_table = self.get_temp_table()
        prefix = self.temp_prefix

        with log_context(schema=self.schema, table=self.base_name, operation="hotswap_by_catalog"):
            self.create_like_temp_table()
            connection = self.connection

            with connection.transaction():
                self.drop()
                for index_name in temp_table.fetch_index_names():
                    if index_name.startswith(prefix):
                        connection.exec_alter_index(index_name, schema=self.schema, rename_to=index_name[len(prefix):])
                temp_table.rename_temp_table()
                if not skip_sequences:
                    self.rename_temp_sequences()

    def schema_hotswap(self, new_schema_name: Optional[str] = None) -> None:
        """
        Move the live table into a shadow schema (temp_<schema> by default).

        Any same-named table already in the shadow schema is dropped first.
        """
        from pgswap.infrastructure.helpers import create_schema, drop_table

        new_schema_name = new_schema_name or f"{self.temp_prefix}{self.schema}"
        connection = self.connection

        with log_context(schema=self.schema, table=self.name, operation="schema_hotswap"):
            with connection.transaction():
                create_schema(connection, new_schema_name)
                drop_table(connection, new_schema_name, self.name, check_exists=True)
                connection.exec_alter_table(self.name, schema=self.schema, new_schema=new_schema_name)

    def do_through_temp_table(self, populate: Callable[["Table"], Any], *, skip_indexes: bool = False) -> Any:
        """
        Rebuild the table through temp_<name> and hotswap it in.

        Steps: drop/create the temp table, call populate(temp_table), index
        it, VACUUM ANALYZE it, hotswap.

        Returns:
            Whatever populate returned

        Raises:
            TempTableError: If called on a temp table
        """
        self._require_live()
        temp_table = self.get_temp_table()

        with log_context(schema=self.schema, table=self.base_name, operation="do_through_temp_table"):
            temp_table.drop(check_exists=True)
            temp_table.create()

            result = populate(temp_table)

            if not skip_indexes:
                temp_table.create_indexes()
            temp_table.vacuum_analyze()

            self.hotswap()
        return result

    def insert_through_temp_table(self, rows: Iterable[Row]) -> None:
        rows = list(rows)
        self.do_through_temp_table(lambda temp_table: temp_table.insert(rows))

    def append_through_temp_table(self, rows: Iterable[Row]) -> None:
        """Like insert_through_temp_table, keeping the live table's current rows."""
        rows = list(rows)

        def populate(temp_table: "Table") -> None:
            if self.exists():
                temp_table.insert_select(f"* FROM {self.qualified_name}")
            temp_table.insert(rows)

        self.do_through_temp_table(populate)

    def rename_temp_table(self) -> None:
        """Rename temp_<name> to <name>; this descriptor stops being a temp table."""
        if not self.temp:
            raise TempTableError(f"{self.qualified_name} is not a temp table")
        self.connection.exec_alter_table(self.name, schema=self.schema, rename_to=self.base_name)
        self._temp = False

    def temp_sequence_names(self) -> List[str]:
        """Serial sequences of the live table still named after temp_<name>."""
        return self.connection.fetch_serial_sequence_names(
            self.base_name,
            self.schema,
            like=f"{self.schema}.{self.temp_name}%",
        )

    def rename_temp_sequences(self) -> None:
        schema_prefix = f"{self.schema}."
        for sequence in self.temp_sequence_names():
            sequence_name = sequence[len(schema_prefix):] if sequence.startswith(schema_prefix) else sequence
            new_name = sequence_name.replace(self.temp_name, self.base_name, 1)
            self.connection.exec_alter_table(sequence_name, schema=self.schema, rename_to=new_name)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_descriptor(self) -> Dict[str, Any]:
        """Dict form accepted by Table.from_spec."""
        index_keys = ("columns", "name", "primary", "unique", "where")
        return {
            "table_name": self.base_name,
            "schema": self.schema,
            "columns": [column.to_descriptor() for column in self.columns],
            "indexes": [
                {key: value for key, value in index.to_descriptor().items() if key in index_keys}
                for index in self.indexes
            ],
            "unlogged": self.unlogged,
            "temp": self.temp,
        }


__all__ = ["Table"]
