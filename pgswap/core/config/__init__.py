# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for pgswap.
"""

from pgswap.core.config.defaults import (
    DatabaseDefaults,
    TableDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DatabaseDefaults",
    "TableDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
