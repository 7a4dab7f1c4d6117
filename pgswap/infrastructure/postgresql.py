# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - PostgreSQL connection handling
# PURPOSE: Statement execution, transaction scoping, and error policy
# CREATED: 18 OCT 2026
# EXPORTS: Connection, connection_scope
# DEPENDENCIES: psycopg
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Wraps one psycopg connection for synchronous, single-connection use:
- autocommit outside explicit transactions (so VACUUM works)
- RawCursor, so statements keep PostgreSQL's native $1..$n placeholders
- dict rows
- server notices forwarded to the logger

Error policy:
    exec_and_log logs each statement at DEBUG and each failure (with its
    SQL and parameters) at ERROR, then raises DatabaseError. A connection
    opened with ignore_errors=True logs the failure, counts it in
    errors_ignored and returns None instead. Inside transaction() a swallowed
    failure aborts the transaction, so the block commits nothing.

Usage:
    from pgswap.infrastructure import connection_scope

    with connection_scope() as connection:
        with connection.transaction():
            connection.exec_drop_table("countries", schema="reporting")
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import psycopg
from psycopg.rows import dict_row

from pgswap.core.config import get_defaults
from pgswap.core.errors import DatabaseError, InvalidArgumentError
from pgswap.core.schema import sql_builder
from pgswap.infrastructure.catalog import CatalogQueries

logger = logging.getLogger(__name__)

Params = Optional[Sequence[Any]]


class Connection(CatalogQueries):
    """
    A borrowed database session.

    Args:
        pgconn: Open psycopg connection (autocommit, dict_row, RawCursor)
        ignore_errors: Log and swallow server errors in exec_and_log
    """

    def __init__(self, pgconn, *, ignore_errors: bool = False):
        self._conn = pgconn
        self.ignore_errors = ignore_errors
        self.errors_ignored = 0

    @classmethod
    def open(cls, conninfo: Optional[str] = None, *, ignore_errors: bool = False, **overrides) -> "Connection":
        """
        Connect to PostgreSQL.

        Args:
            conninfo: Connection string; built from DatabaseDefaults when omitted
            ignore_errors: See class docstring
            **overrides: Per-connection DatabaseDefaults overrides (host, dbname, ...)

        Raises:
            DatabaseError: If the connection cannot be established
        """
        if conninfo is None:
            conninfo = get_defaults().database.conninfo(**overrides)

        logger.debug("Connecting to PostgreSQL...")
        try:
            pgconn = psycopg.connect(
                conninfo,
                autocommit=True,
                row_factory=dict_row,
                cursor_factory=psycopg.RawCursor,
            )
        except psycopg.Error as e:
            logger.error(f"PostgreSQL connection error: {e}")
            raise DatabaseError(f"Could not connect to PostgreSQL: {e}") from e
        logger.debug("PostgreSQL connection established")

        connection = cls(pgconn, ignore_errors=ignore_errors)
        pgconn.add_notice_handler(connection._log_notice)
        return connection

    @staticmethod
    def _log_notice(diagnostic) -> None:
        message = (diagnostic.message_primary or "").strip()
        if message:
            logger.warning(message)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def closed(self) -> bool:
        return bool(self._conn.closed)

    def close(self) -> None:
        if not self.closed:
            self._conn.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def transaction(self):
        """
        BEGIN ... COMMIT around the block; ROLLBACK and re-raise on exception.

        Do not run unrelated statements on this connection inside the block.
        """
        with self._conn.transaction():
            yield self

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def execute(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        """
        Run one statement.

        Returns:
            Result rows as dicts (empty for statements without a result set)

        Raises:
            DatabaseError: If the server rejects the statement
        """
        try:
            with self._conn.cursor() as cursor:
                cursor.execute(sql, list(params) if params else None)
                if cursor.description is None:
                    return []
                return cursor.fetchall()
        except psycopg.Error as e:
            raise DatabaseError(str(e).strip(), sql=sql, params=params) from e

    @staticmethod
    def format_statement(sql: str, params: Params = None) -> str:
        text = f"\n{sql}"
        if params:
            text += f"\n            {list(params)}"
        return text

    def exec_and_log(self, sql: Optional[str], params: Params = None) -> Optional[List[Dict[str, Any]]]:
        """
        Run one statement under the connection's error policy.

        Raises:
            InvalidArgumentError: If sql is None (a builder rejected its input)
            DatabaseError: On server error, unless ignore_errors is set
        """
        if sql is None:
            raise InvalidArgumentError("No statement to execute")

        logger.debug(self.format_statement(sql, params))
        try:
            return self.execute(sql, params)
        except DatabaseError as e:
            logger.error(f"Error executing:{self.format_statement(sql, params)}\n{e}")
            if self.ignore_errors:
                self.errors_ignored += 1
                return None
            raise

    def exec_file(self, filename: Union[str, Path]) -> List[Optional[List[Dict[str, Any]]]]:
        """Run each ;-separated statement of a SQL file; returns one result per statement."""
        content = Path(filename).read_text()
        statements = [statement.strip() for statement in content.split(";")]
        return [self.exec_and_log(statement) for statement in statements if statement]

    # =========================================================================
    # BUILDER WRAPPERS
    # =========================================================================

    def _exec_built(self, build: Callable[..., Optional[str]], *args, params: Params = None, **options):
        sql = build(*args, **options)
        if sql is None:
            raise InvalidArgumentError(
                f"{build.__name__} could not build a statement from {args!r} {options!r}"
            )
        return self.exec_and_log(sql, params)

    def exec_create_table(self, table_name: str, **options):
        return self._exec_built(sql_builder.create_table, table_name, **options)

    def exec_drop_table(self, table_name: str, **options):
        return self._exec_built(sql_builder.drop_table, table_name, **options)

    def exec_alter_table(self, table_name: str, **options):
        return self._exec_built(sql_builder.alter_table, table_name, **options)

    def exec_create_index(self, index_name: str, table_name: str, **options):
        return self._exec_built(sql_builder.create_index, index_name, table_name, **options)

    def exec_alter_index(self, index_name: str, **options):
        return self._exec_built(sql_builder.alter_index, index_name, **options)

    def exec_drop_index(self, index_name: str, **options):
        return self._exec_built(sql_builder.drop_index, index_name, **options)

    def exec_insert_into(self, table_name: str, *, params: Params = None, **options):
        return self._exec_built(sql_builder.insert_into, table_name, params=params, **options)

    def exec_insert_into_select(self, table_name: str, select_text: str, *, params: Params = None, **options):
        return self._exec_built(sql_builder.insert_into_select, table_name, select_text, params=params, **options)

    def exec_update(self, table_name: str, *, params: Params = None, **options):
        return self._exec_built(sql_builder.update, table_name, params=params, **options)


@contextmanager
def connection_scope(conninfo: Optional[str] = None, **options):
    """
    Context manager for a Connection that is closed on every exit path.

    Args:
        conninfo: Optional connection string
        **options: ignore_errors and DatabaseDefaults overrides

    Yields:
        Connection
    """
    connection = Connection.open(conninfo, **options)
    try:
        yield connection
    finally:
        connection.close()


__all__ = [
    "Connection",
    "connection_scope",
]
