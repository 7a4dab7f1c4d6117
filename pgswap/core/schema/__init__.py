# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - SQL text generation
# PURPOSE: Pure builders for the DDL/DML statements pgswap executes
# CREATED: 18 OCT 2026
# ============================================================================

from pgswap.core.schema import sql_builder
from pgswap.core.schema.sql_builder import qualified_relation_name

__all__ = [
    "sql_builder",
    "qualified_relation_name",
]
