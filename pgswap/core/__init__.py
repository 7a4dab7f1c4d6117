# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export errors, configuration, models, and SQL builders
# CREATED: 18 OCT 2026
# ============================================================================

from pgswap.core.errors import (
    PgSwapError,
    InvalidArgumentError,
    NotFoundError,
    DatabaseError,
    NotConnectedError,
    TempTableError,
)
from pgswap.core.config import get_defaults
from pgswap.core.models import Column, Index, IndexSpec, Table, TableSpec
from pgswap.core.schema import sql_builder

__all__ = [
    # Errors
    "PgSwapError",
    "InvalidArgumentError",
    "NotFoundError",
    "DatabaseError",
    "NotConnectedError",
    "TempTableError",
    # Config
    "get_defaults",
    # Models
    "Column",
    "Index",
    "IndexSpec",
    "Table",
    "TableSpec",
    # Schema
    "sql_builder",
]
