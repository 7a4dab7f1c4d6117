# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Fixtures for unit tests
# PURPOSE: Recording Connection over a mocked psycopg connection
# CREATED: 18 OCT 2026
# ============================================================================
"""
Shared fixtures.

The `connection` fixture is a real pgswap Connection whose psycopg
connection is a MagicMock and whose `execute` records every statement
into `connection.log`. Transaction boundaries are recorded as BEGIN,
COMMIT and ROLLBACK so tests can assert statement order and atomicity.

Catalog queries return no rows unless a test overrides them, so every
relation looks absent by default.
"""

import pytest
from unittest.mock import MagicMock

from pgswap.core.config import reset_defaults
from pgswap.infrastructure.postgresql import Connection


# ============================================================================
# ENVIRONMENT
# ============================================================================

@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch):
    """Start every test from built-in defaults."""
    for name in (
        "PGSWAP_DEFAULT_SCHEMA",
        "PGSWAP_TABLE_PATH",
        "PGSWAP_BATCH_SIZE",
        "PGSWAP_UNLOGGED",
        "DATABASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_defaults()
    yield
    reset_defaults()


# ============================================================================
# CONNECTION
# ============================================================================

def _is_catalog_query(sql: str) -> bool:
    return sql.startswith("SELECT")


@pytest.fixture
def pgconn():
    """Mocked psycopg connection."""
    mock = MagicMock()
    mock.closed = False
    return mock


@pytest.fixture
def connection(pgconn):
    """Recording Connection; see module docstring."""
    conn = Connection(pgconn)
    conn.log = []

    def record(sql, params=None):
        conn.log.append(sql.strip())
        return []

    conn.execute = MagicMock(side_effect=record)

    transaction = pgconn.transaction.return_value
    transaction.__enter__.side_effect = lambda: conn.log.append("BEGIN")

    def finish(exc_type, exc, tb):
        conn.log.append("COMMIT" if exc_type is None else "ROLLBACK")
        return False

    transaction.__exit__.side_effect = finish
    return conn


@pytest.fixture
def statements(connection):
    """Callable returning the recorded statements, catalog queries excluded."""
    def _statements():
        return [sql for sql in connection.log if not _is_catalog_query(sql)]
    return _statements
