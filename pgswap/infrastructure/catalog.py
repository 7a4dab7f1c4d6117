# ============================================================================
# CATALOG INTROSPECTION
# ============================================================================
# STATUS: Infrastructure - PostgreSQL catalog queries
# PURPOSE: Translate pg_catalog / information_schema rows into plain values
# CREATED: 18 OCT 2026
# EXPORTS: CatalogQueries
# ============================================================================
"""
Catalog Introspection

Mixin providing the read-only catalog primitives used by the models:
schema/table/index existence, column and index descriptions, and serial
sequence names. Nothing is cached; every call re-queries the catalog.

The host class supplies execute(sql, params) -> list of dict rows.
"""

from typing import Any, Dict, List, Optional


class CatalogQueries:
    """Catalog lookups; mixed into Connection."""

    def exec_simple(self, sql: str, params: Optional[List[Any]] = None) -> Any:
        """First column of the first row, or None for an empty result."""
        rows = self.execute(sql, params)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    # =========================================================================
    # EXISTENCE
    # =========================================================================

    def schema_exists(self, schema_name: str) -> bool:
        if schema_name == "public":
            return True
        sql = "SELECT 1 FROM information_schema.schemata WHERE schema_name = $1"
        return self.exec_simple(sql, [schema_name]) is not None

    def table_exists(self, table_name: str, schema_name: str) -> bool:
        sql = """
            SELECT COUNT(1)
            FROM pg_catalog.pg_class C
            LEFT JOIN pg_catalog.pg_namespace N ON C.relnamespace = N.oid
            WHERE C.relname = $1
              AND N.nspname = $2
              AND C.relkind = 'r'
        """
        return int(self.exec_simple(sql, [table_name, schema_name]) or 0) > 0

    def index_exists(self, index_name: str, schema_name: str) -> bool:
        sql = "SELECT COUNT(1) FROM pg_catalog.pg_indexes WHERE schemaname = $2 AND indexname = $1"
        return int(self.exec_simple(sql, [index_name, schema_name]) or 0) > 0

    # =========================================================================
    # LISTINGS
    # =========================================================================

    def fetch_table_names(self, schema_name: str) -> List[str]:
        sql = """
            SELECT C.relname AS table_name
            FROM pg_catalog.pg_class C
            JOIN pg_catalog.pg_namespace N ON C.relnamespace = N.oid
            WHERE C.relkind = 'r'
              AND N.nspname = $1
            ORDER BY 1
        """
        return [row["table_name"] for row in self.execute(sql, [schema_name])]

    def fetch_schema_names(self) -> List[str]:
        sql = """
            SELECT S.schema_name
            FROM information_schema.schemata S
            WHERE S.schema_name NOT LIKE 'pg\\_%'
            ORDER BY 1
        """
        return [row["schema_name"] for row in self.execute(sql)]

    def fetch_relation_sizes(self) -> List[Dict[str, Any]]:
        """Every user relation with its on-disk size, largest first."""
        sql = """
            SELECT
                N.nspname || '.' || C.relname AS relation,
                pg_size_pretty(pg_relation_size(C.oid)) AS size,
                TS.spcname AS tablespace
            FROM pg_catalog.pg_class C
            LEFT JOIN pg_catalog.pg_namespace N ON N.oid = C.relnamespace
            LEFT JOIN pg_catalog.pg_tablespace TS ON C.reltablespace = TS.oid
            WHERE N.nspname NOT IN ('pg_catalog', 'information_schema')
            ORDER BY pg_relation_size(C.oid) DESC
        """
        return [
            {"relation": row["relation"], "size": row["size"], "tablespace": row["tablespace"]}
            for row in self.execute(sql)
        ]

    def fetch_tablespace_names(self) -> List[str]:
        return [row["spcname"] for row in self.execute("SELECT spcname FROM pg_catalog.pg_tablespace")]

    # =========================================================================
    # TABLE STRUCTURE
    # =========================================================================

    def fetch_columns(self, table_name: str, schema_name: str) -> List[Dict[str, Any]]:
        """
        Column descriptors in ordinal order.

        Types are normalized to the spelling used in table specifications
        (VARCHAR(n), CHAR(n), NUMERIC(p,s), INT, ...). Only sees tables the
        current user has privileges on.
        """
        sql = """
            SELECT
                column_name,
                is_nullable,
                CASE WHEN data_type = 'character' THEN 'CHAR(' || character_maximum_length || ')'
                     WHEN data_type = 'character varying' THEN 'VARCHAR(' || COALESCE(character_maximum_length, 255) || ')'
                     WHEN data_type = 'numeric' THEN 'NUMERIC(' || COALESCE(numeric_precision, 50) || ',' || COALESCE(numeric_scale, 20) || ')'
                     WHEN data_type = 'integer' THEN 'INT'
                     WHEN data_type = 'ARRAY' THEN 'VARCHAR(255)[]'
                     ELSE UPPER(data_type) END AS data_type,
                column_default
            FROM information_schema.columns
            WHERE table_schema = $2
              AND table_name = $1
            ORDER BY ordinal_position
        """
        rows = self.execute(sql, [table_name, schema_name])
        return [
            {
                "column_name": row["column_name"],
                "is_nullable": row["is_nullable"] == "YES",
                "data_type": row["data_type"],
                "column_default": row["column_default"],
            }
            for row in rows
        ]

    def fetch_index_names(self, table_name: str, schema_name: str) -> List[str]:
        sql = """
            SELECT C.relname AS index_name
            FROM pg_catalog.pg_class C
            JOIN pg_catalog.pg_namespace N ON N.oid = C.relnamespace
            JOIN pg_catalog.pg_index I ON I.indexrelid = C.oid
            JOIN pg_catalog.pg_class C2 ON C2.oid = I.indrelid
            WHERE C.relkind = 'i'
              AND N.nspname = $2
              AND C2.relname = $1
            ORDER BY C.oid
        """
        return [row["index_name"] for row in self.execute(sql, [table_name, schema_name])]

    def fetch_index_info(self, index_name: str, schema_name: str) -> Optional[Dict[str, Any]]:
        """
        Returns:
            {"oid", "unique", "primary"} for the index, or None if missing
        """
        sql = """
            SELECT
                C.oid,
                I.indisunique AS "unique",
                I.indisprimary AS "primary"
            FROM pg_catalog.pg_class C
            JOIN pg_catalog.pg_namespace N ON C.relnamespace = N.oid
            JOIN pg_catalog.pg_index I ON I.indexrelid = C.oid
            WHERE N.nspname = $1
              AND C.relname = $2
        """
        rows = self.execute(sql, [schema_name, index_name])
        if not rows:
            return None
        row = rows[0]
        return {"oid": row["oid"], "unique": bool(row["unique"]), "primary": bool(row["primary"])}

    def fetch_index_column_names(self, index_oid: int) -> List[str]:
        """Ordered column names or expressions (e.g. lower(name::text)) of an index."""
        sql = """
            SELECT pg_catalog.pg_get_indexdef(A.attrelid, A.attnum, TRUE) AS column_name
            FROM pg_catalog.pg_attribute A
            WHERE A.attrelid = $1::oid
              AND A.attnum > 0
              AND NOT A.attisdropped
            ORDER BY A.attnum
        """
        return [row["column_name"] for row in self.execute(sql, [index_oid])]

    def fetch_serial_sequence_names(
        self,
        table_name: str,
        schema_name: str,
        like: Optional[str] = None,
    ) -> List[str]:
        """
        Schema-qualified names of sequences owned by the table's columns.

        Args:
            like: Optional LIKE pattern the sequence name must match
        """
        qualified = f'"{schema_name}"."{table_name}"'
        sql = """
            SELECT pg_get_serial_sequence($1, column_name) AS sequence
            FROM information_schema.columns
            WHERE table_schema = $2
              AND table_name = $3
              AND pg_get_serial_sequence($1, column_name) IS NOT NULL
        """
        params = [qualified, schema_name, table_name]
        if like is not None:
            sql += "  AND pg_get_serial_sequence($1, column_name) LIKE $4\n"
            params.append(like)
        return [row["sequence"] for row in self.execute(sql, params)]


__all__ = ["CatalogQueries"]
