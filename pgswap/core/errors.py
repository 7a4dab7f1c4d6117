# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Core - Exceptions raised by models and infrastructure
# PURPOSE: One hierarchy for argument, lookup, and database failures
# CREATED: 18 OCT 2026
# EXPORTS: PgSwapError, InvalidArgumentError, NotFoundError, DatabaseError,
#          NotConnectedError, TempTableError
# ============================================================================
"""
Error Taxonomy

- InvalidArgumentError: malformed construction input (fails fast)
- NotFoundError: a schema, table, index, or specification file is missing
- DatabaseError: the server rejected a statement
- NotConnectedError: a Table was used for I/O without a connection
- TempTableError: a temp/live table operation was called on the wrong kind
"""

from typing import Any, Optional, Sequence


class PgSwapError(Exception):
    """Base exception for pgswap operations."""


class InvalidArgumentError(PgSwapError, ValueError):
    """Raised when required construction input is missing or malformed."""

    def __init__(self, message: str, field: str = None, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(message)


class NotFoundError(PgSwapError, LookupError):
    """Raised when a relation or specification does not exist."""

    def __init__(self, message: str, relation: str = None, schema: str = None):
        self.relation = relation
        self.schema = schema
        super().__init__(message)


class DatabaseError(PgSwapError):
    """
    Raised when the server rejects a statement.

    Carries the offending SQL and its parameters. The driver exception
    is chained as __cause__.
    """

    def __init__(
        self,
        message: str,
        sql: Optional[str] = None,
        params: Optional[Sequence[Any]] = None,
    ):
        self.sql = sql
        self.params = params
        super().__init__(message)


class NotConnectedError(PgSwapError, RuntimeError):
    """Raised when a table has no open connection."""


class TempTableError(PgSwapError, RuntimeError):
    """Raised when a temp-only or live-only operation gets the other kind."""


__all__ = [
    "PgSwapError",
    "InvalidArgumentError",
    "NotFoundError",
    "DatabaseError",
    "NotConnectedError",
    "TempTableError",
]
