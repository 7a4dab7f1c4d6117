# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Core - Table, index, and column descriptors
# PURPOSE: Export the schema models and their stored specifications
# CREATED: 18 OCT 2026
# ============================================================================

from pgswap.core.models.column import Column, RawColumn, inject_raw_columns
from pgswap.core.models.spec import IndexSpec, TableSpec
from pgswap.core.models.index import Index
from pgswap.core.models.table import Table

__all__ = [
    # Columns
    "Column",
    "RawColumn",
    "inject_raw_columns",
    # Specifications
    "IndexSpec",
    "TableSpec",
    # Relations
    "Index",
    "Table",
]
