# ============================================================================
# VERSION - PGSWAP
# ============================================================================
"""
Version information for pgswap.

This is the single source of truth for the package version.
Updated manually for each release.
"""
__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))
