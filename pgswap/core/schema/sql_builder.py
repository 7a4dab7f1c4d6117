# ============================================================================
# SQL BUILDER
# ============================================================================
# STATUS: Core - Pure SQL text generation
# PURPOSE: CREATE/ALTER/DROP TABLE and INDEX, INSERT, UPDATE, SELECT text
# CREATED: 18 OCT 2026
# EXPORTS: create_table, drop_table, alter_table, create_index, alter_index,
#          drop_index, insert_into, insert_into_select, update, select,
#          column_clause, qualified_relation_name, vacuum_analyze,
#          create_schema, add_column, create_ignore_duplicates_rule, drop_rule
# ============================================================================
"""
SQL Builder - Statement Text Generation.

Every function is pure: it maps a relation name plus keyword options to a
SQL string, or returns None when a required identifier or option is
missing. Nothing here touches a connection.

Identifiers are wrapped in double quotes. Values are never interpolated;
DML uses PostgreSQL's native positional placeholders ($1, $2, ...).
Column defaults, WHERE clauses and select expressions are passed through
verbatim, so quoting them correctly is the caller's job.

Usage:
    from pgswap.core.schema import sql_builder

    sql_builder.create_index(
        "idx_countries_on_code", "countries",
        schema="reporting", columns=["code"], unique=True,
    )
    # CREATE UNIQUE INDEX "idx_countries_on_code" ON "reporting"."countries" (code);
"""

import re
from typing import Any, Iterable, Optional, Sequence

DEFAULT_DATA_TYPE = "VARCHAR(255)"

# Index column tokens with an uppercase letter are quoted; lowercase tokens
# (plain identifiers and expressions such as lower(code)) are left bare.
_NEEDS_QUOTING = re.compile(r"[A-Z]+")


def _quote(identifier: Any) -> str:
    return f'"{identifier}"'


def _placeholders(count: int) -> str:
    return ", ".join(f"${i}" for i in range(1, count + 1))


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def qualified_relation_name(relation_name: str, schema: Optional[str] = None) -> str:
    """Return '"name"' or '"schema"."name"'."""
    if schema is None:
        return _quote(relation_name)
    return f"{_quote(schema)}.{_quote(relation_name)}"


# ============================================================================
# TABLES
# ============================================================================

def column_clause(column) -> Optional[str]:
    """
    Build one column definition: "name" TYPE [constraints...].

    Args:
        column: Any object with name, data_type, is_nullable, default and
            constraints attributes (see pgswap.core.models.Column)

    Returns:
        Column definition, or None if the column has no name
    """
    name = getattr(column, "name", None)
    if not name:
        return None

    data_type = getattr(column, "data_type", None) or DEFAULT_DATA_TYPE
    constraints = list(getattr(column, "constraints", None) or [])

    if not getattr(column, "is_nullable", False):
        constraints.append("NOT NULL")

    default = getattr(column, "default", None)
    if default is not None:
        constraints.append(f"DEFAULT {_literal(default)}")

    return " ".join([_quote(name), data_type] + constraints)


def create_table(
    table_name: str,
    *,
    schema: Optional[str] = None,
    columns: Iterable = (),
    unlogged: bool = False,
    like: Optional[str] = None,
) -> Optional[str]:
    """
    Build CREATE TABLE.

    Args:
        table_name: Table name
        schema: Optional schema name
        columns: Column descriptors, one clause each
        unlogged: Emit CREATE UNLOGGED TABLE
        like: Qualified name of a table to clone; replaces the column list

    Returns:
        CREATE TABLE statement, or None if table_name is empty
    """
    if not table_name:
        return None

    sql = f"CREATE {'UNLOGGED ' if unlogged else ''}TABLE "
    sql += qualified_relation_name(table_name, schema)

    if like is not None:
        sql += f" (LIKE {like})"
    else:
        clauses = [column_clause(column) for column in columns]
        sql += "\n(" + ",\n ".join(c for c in clauses if c is not None) + "\n )"

    return sql + ";"


def drop_table(
    table_name: str,
    *,
    schema: Optional[str] = None,
    check_exists: bool = False,
) -> Optional[str]:
    """Build DROP TABLE [IF EXISTS]."""
    if not table_name:
        return None
    if_exists = " IF EXISTS" if check_exists else ""
    return f"DROP TABLE{if_exists} {qualified_relation_name(table_name, schema)};"


def alter_table(
    table_name: str,
    *,
    schema: Optional[str] = None,
    rename_to: Optional[str] = None,
    primary_index: Optional[str] = None,
    new_schema: Optional[str] = None,
) -> Optional[str]:
    """
    Build ALTER TABLE for exactly one change.

    The first of rename_to, primary_index and new_schema that is set wins.

    Returns:
        ALTER TABLE statement, or None if no change was requested
    """
    if not table_name:
        return None

    if rename_to is not None:
        action = f"RENAME TO {_quote(rename_to)}"
    elif primary_index is not None:
        action = f"ADD PRIMARY KEY USING INDEX {_quote(primary_index)}"
    elif new_schema is not None:
        action = f"SET SCHEMA {_quote(new_schema)}"
    else:
        return None

    return f"ALTER TABLE {qualified_relation_name(table_name, schema)} {action};"


def add_column(table_name: str, column, *, schema: Optional[str] = None) -> Optional[str]:
    """Build ALTER TABLE ... ADD COLUMN from a column descriptor."""
    clause = column_clause(column)
    if not table_name or clause is None:
        return None
    return f"ALTER TABLE {qualified_relation_name(table_name, schema)} ADD COLUMN {clause};"


def vacuum_analyze(table_name: str, *, schema: Optional[str] = None) -> Optional[str]:
    """Build VACUUM ANALYZE (no trailing semicolon, runs outside a transaction)."""
    if not table_name:
        return None
    return f"VACUUM ANALYZE {qualified_relation_name(table_name, schema)}"


def create_schema(schema: str) -> Optional[str]:
    """Build CREATE SCHEMA."""
    if not schema:
        return None
    return f"CREATE SCHEMA {_quote(schema)}"


# ============================================================================
# INDEXES
# ============================================================================

def create_index(
    index_name: str,
    table_name: str,
    *,
    schema: Optional[str] = None,
    unique: bool = False,
    columns: Sequence[str] = (),
    where: Optional[str] = None,
) -> Optional[str]:
    """
    Build CREATE [UNIQUE] INDEX.

    Args:
        index_name: Index name (never schema-qualified; it lives with the table)
        table_name: Indexed table
        schema: Optional schema of the table
        unique: Emit CREATE UNIQUE INDEX
        columns: Column names or expressions
        where: Predicate for a partial index

    Returns:
        CREATE INDEX statement, or None if a name is empty
    """
    if not table_name or not index_name:
        return None

    column_list = ", ".join(
        _quote(c) if _NEEDS_QUOTING.search(str(c)) else str(c) for c in columns
    )
    where_clause = f" WHERE {where}" if where and where.strip() else ""

    sql = "CREATE "
    if unique:
        sql += "UNIQUE "
    sql += f"INDEX {_quote(index_name)} ON {qualified_relation_name(table_name, schema)} "
    return sql + f"({column_list}){where_clause};"


def alter_index(
    index_name: str,
    *,
    schema: Optional[str] = None,
    rename_to: Optional[str] = None,
) -> Optional[str]:
    """Build ALTER INDEX ... RENAME TO, or None without a new name."""
    if not index_name or rename_to is None:
        return None
    return f"ALTER INDEX {qualified_relation_name(index_name, schema)} RENAME TO {_quote(rename_to)};"


def drop_index(
    index_name: str,
    *,
    schema: Optional[str] = None,
    check_exists: bool = False,
) -> Optional[str]:
    """Build DROP INDEX [IF EXISTS]."""
    if not index_name:
        return None
    if_exists = " IF EXISTS" if check_exists else ""
    return f"DROP INDEX{if_exists} {qualified_relation_name(index_name, schema)};"


# ============================================================================
# DML
# ============================================================================

def _insert_head(table_name: str, schema: Optional[str], columns: Sequence[str]) -> str:
    column_list = ", ".join(_quote(c) for c in columns)
    return f"INSERT INTO {qualified_relation_name(table_name, schema)}\n            ({column_list})"


def insert_into(
    table_name: str,
    *,
    schema: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    Build a parameterized INSERT ... VALUES ($1..$n).

    Returns:
        INSERT statement, or None if table_name or columns are empty
    """
    if not table_name or not columns:
        return None
    values = _placeholders(len(columns))
    return _insert_head(table_name, schema, columns) + f"\n     VALUES ({values});"


def insert_into_select(
    table_name: str,
    select_text: str,
    *,
    schema: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    Build INSERT ... SELECT <select_text>.

    select_text is everything after SELECT, e.g. '* FROM "reporting"."t"'.
    """
    if not table_name or not columns:
        return None
    return _insert_head(table_name, schema, columns) + f"\nSELECT\n    {select_text};"


def update(
    table_name: str,
    *,
    schema: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
    where_clause: Optional[str] = None,
) -> Optional[str]:
    """
    Build a parameterized UPDATE ... SET (cols) = ($1..$n) [WHERE ...].

    Returns:
        UPDATE statement, or None if table_name or columns are empty
    """
    if not table_name or not columns:
        return None

    column_list = ", ".join(_quote(c) for c in columns)
    sql = f"UPDATE {qualified_relation_name(table_name, schema)}"
    sql += f"\n  SET ({column_list})"
    sql += f"\n    = ({_placeholders(len(columns))})"
    if where_clause is not None:
        sql += f"\n  WHERE {where_clause}"
    return sql + ";"


def select(
    table_name: str,
    *,
    schema: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
    where_clause: Optional[str] = None,
    order: Optional[str] = None,
    group: Optional[str] = None,
    having: Optional[str] = None,
) -> Optional[str]:
    """
    Build a SELECT over one table.

    columns, where_clause, order, group and having are raw SQL fragments;
    where_clause may reference $n parameters bound at execution.
    """
    if not table_name:
        return None

    if isinstance(columns, str):
        columns = [columns]

    sql = "SELECT " + (", ".join(columns) if columns else "*")
    sql += f" FROM {qualified_relation_name(table_name, schema)}"
    if where_clause is not None:
        sql += f" WHERE {where_clause}"
    if group is not None:
        sql += f" GROUP BY {group}"
    if having is not None:
        sql += f" HAVING {having}"
    if order is not None:
        sql += f" ORDER BY {order}"
    return sql + ";"


# ============================================================================
# RULES
# ============================================================================

def create_ignore_duplicates_rule(
    rule_name: str,
    table_name: str,
    key_columns: Sequence[str],
    *,
    schema: Optional[str] = None,
) -> Optional[str]:
    """
    Build a rule that turns INSERTs of an existing key into no-ops.

    key_columns are emitted bare, the same way as index columns are.
    """
    if not rule_name or not table_name or not key_columns:
        return None

    qualified = qualified_relation_name(table_name, schema)
    keys = ", ".join(key_columns)
    new_keys = ", ".join(f"NEW.{c}" for c in key_columns)
    return (
        f"CREATE RULE {_quote(rule_name)} AS ON INSERT TO {qualified}\n"
        f"  WHERE EXISTS( SELECT 1 FROM {qualified}\n"
        f"                WHERE ({keys}) = ( {new_keys} )\n"
        f"              )\n"
        f"    DO INSTEAD NOTHING;"
    )


def drop_rule(rule_name: str, table_name: str, *, schema: Optional[str] = None) -> Optional[str]:
    """Build DROP RULE ... ON table."""
    if not rule_name or not table_name:
        return None
    return f"DROP RULE {_quote(rule_name)} ON {qualified_relation_name(table_name, schema)};"


__all__ = [
    "DEFAULT_DATA_TYPE",
    "qualified_relation_name",
    "column_clause",
    "create_table",
    "drop_table",
    "alter_table",
    "add_column",
    "vacuum_analyze",
    "create_schema",
    "create_index",
    "alter_index",
    "drop_index",
    "insert_into",
    "insert_into_select",
    "update",
    "select",
    "create_ignore_duplicates_rule",
    "drop_rule",
]
