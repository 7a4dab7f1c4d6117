# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for database connections and table handling
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for connecting to PostgreSQL and for table
descriptors. These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Connection parameters for the PostgreSQL server.

    DATABASE_URL, when set, wins over the individual fields.
    """
    host: str = "localhost"
    port: int = 5432
    dbname: str = "postgres"
    user: str = "postgres"
    password: str = ""
    sslmode: str = "prefer"
    connect_timeout: int = 10
    url: Optional[str] = None

    def conninfo(self, **overrides) -> str:
        """
        Build a libpq connection string.

        Args:
            **overrides: Per-call replacements for host, port, dbname, user,
                password, sslmode or connect_timeout

        Returns:
            Connection string accepted by psycopg.connect
        """
        if self.url and not overrides:
            return self.url

        params = {
            "host": self.host,
            "port": self.port,
            "dbname": self.dbname,
            "user": self.user,
            "password": self.password,
            "sslmode": self.sslmode,
            "connect_timeout": self.connect_timeout,
        }
        params.update(overrides)
        return " ".join(
            f"{key}={value}" for key, value in params.items() if value not in (None, "")
        )

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", 5432)),
            dbname=os.getenv("POSTGRES_DB", "postgres"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            sslmode=os.getenv("POSTGRES_SSLMODE", "prefer"),
            connect_timeout=int(os.getenv("POSTGRES_CONNECT_TIMEOUT", 10)),
            url=os.getenv("DATABASE_URL") or None,
        )


@dataclass(frozen=True)
class TableDefaults:
    """
    Defaults applied to table descriptors.
    """
    schema: str = "reporting"
    table_path: str = "catalog/table"
    batch_size: int = 200
    unlogged: bool = True
    temp_prefix: str = "temp_"

    @classmethod
    def from_env(cls) -> "TableDefaults":
        """Create from environment variables."""
        return cls(
            schema=os.getenv("PGSWAP_DEFAULT_SCHEMA", "reporting"),
            table_path=os.getenv("PGSWAP_TABLE_PATH", "catalog/table"),
            batch_size=int(os.getenv("PGSWAP_BATCH_SIZE", 200)),
            unlogged=_env_bool("PGSWAP_UNLOGGED", True),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)
    tables: TableDefaults = field(default_factory=TableDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            database=DatabaseDefaults.from_env(),
            tables=TableDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DatabaseDefaults",
    "TableDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
