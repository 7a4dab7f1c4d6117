#!/usr/bin/env python
# ============================================================================
# TABLE SQL SCRIPT
# ============================================================================
# PURPOSE: Print or apply the DDL of a stored table specification
# USAGE:
#   python scripts/table_sql.py countries                 # Preview DDL
#   python scripts/table_sql.py countries --temp          # Preview temp_ DDL
#   python scripts/table_sql.py countries --execute       # Create table + indexes
#   python scripts/table_sql.py countries --status        # Compare with the database
# ============================================================================

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pgswap import PgSwapError, Table, configure_logging, connection_scope


def print_status(table: Table) -> int:
    """Print the live state of the table; returns the process exit code."""
    with table.with_connection() as (table, connection):
        if not table.exists():
            print(f"{table.qualified_name} does not exist")
            return 1

        columns = Table.fetch_columns(connection, table.name, table.schema)
        print(f"Columns ({len(columns)}):")
        for column in columns:
            print(f"  - {column.name} {column.data_type}")

        materialized = table.fetch_indexes()
        print(f"\nIndexes ({len(materialized)}):")
        for index in materialized:
            converged = any(index.equivalent(desired) for desired in table.indexes)
            print(f"  - {index.name} ({', '.join(index.column_names)}){'' if converged else '  [not in specification]'}")

        missing = [d for d in table.indexes if not any(d.equivalent(i) for i in materialized)]
        for index in missing:
            print(f"  - {index.name} ({', '.join(index.column_names)})  [missing]")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Print or apply the DDL of a stored table specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/table_sql.py countries                 # Preview DDL
  python scripts/table_sql.py countries --execute       # Create table and indexes
  python scripts/table_sql.py countries --status        # Check current installation

Environment Variables:
  PGSWAP_TABLE_PATH     Directory of <table>.json specifications (default: catalog/table)
  PGSWAP_DEFAULT_SCHEMA Schema when the specification has none (default: reporting)
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
        """
    )
    parser.add_argument("table", help="Table specification name (without .json)")
    parser.add_argument(
        "--path",
        type=str,
        help="Directory holding table specifications (overrides PGSWAP_TABLE_PATH)"
    )
    parser.add_argument(
        "--temp",
        action="store_true",
        help="Render the temp_ staging table instead of the live table"
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Create the table and its indexes instead of printing DDL"
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Compare the specification with the database"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (every statement at DEBUG)"
    )
    args = parser.parse_args()

    configure_logging(level="DEBUG" if args.verbose else "INFO")

    try:
        table = Table.load(args.table, path=args.path, temp=args.temp)
    except PgSwapError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if args.status:
        sys.exit(print_status(table))

    if not args.execute:
        print(table.to_sql(), end="")
        return

    print("=" * 70)
    print(f"Creating {table.qualified_name}")
    print("=" * 70)
    try:
        with connection_scope() as connection:
            table.connection = connection
            table.create(force=True)
            created = table.create_indexes()
    except PgSwapError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"✅ Created {table.qualified_name} with {len(created)} index(es)")


if __name__ == "__main__":
    main()
