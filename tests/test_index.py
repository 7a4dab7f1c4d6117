# ============================================================================
# INDEX MODEL TESTS
# ============================================================================
# STATUS: Tests - Index identity and DDL operations
# PURPOSE: Verify naming, equivalence, creation and catalog loading
# CREATED: 18 OCT 2026
# ============================================================================
"""
Index Model Tests

Covers:
1. Construction invariants (owner must be a Table, columns non-empty)
2. Generated and explicit names, temp_ prefix
3. Equivalence vs. equality
4. create() statement sequence, primary promotion, replace-by-name
5. exists(), rename(), fetch() from the catalog
6. Minimal descriptors

Run with:
    pytest tests/test_index.py -v
"""

import logging

import pytest
from unittest.mock import MagicMock

from pgswap.core.errors import InvalidArgumentError, NotFoundError
from pgswap.core.logging import log_context
from pgswap.core.models import Index, Table


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def diego_table(connection):
    """reporting.diego_table (wei_column, mike_column)."""
    return Table(
        "diego_table",
        schema="reporting",
        columns=[{"name": "wei_column"}, {"name": "mike_column"}],
        connection=connection,
    )


# ============================================================================
# CONSTRUCTION
# ============================================================================

class TestIndexConstruction:
    """Tests for construction invariants."""

    def test_owner_must_be_table(self):
        with pytest.raises(InvalidArgumentError):
            Index({"base_name": "diego_table"}, ["wei_column"])

    def test_owner_required(self):
        with pytest.raises(InvalidArgumentError):
            Index(None, ["wei_column"])

    def test_columns_required(self, diego_table):
        with pytest.raises(InvalidArgumentError):
            Index(diego_table, [])

    def test_single_column_string(self, diego_table):
        assert Index(diego_table, "wei_column").column_names == ("wei_column",)

    def test_primary_implies_unique(self, diego_table):
        index = Index(diego_table, ["wei_column"], primary=True)
        assert index.primary
        assert index.unique


# ============================================================================
# NAMING
# ============================================================================

class TestIndexNaming:
    """Tests for effective names."""

    def test_single_column(self, diego_table):
        assert Index(diego_table, ["wei_column"]).name == "idx_diego_table_on_wei_column"

    def test_additional_column_uses_position(self, diego_table):
        index = Index(diego_table, ["wei_column", "mike_column"])
        assert index.name == "idx_diego_table_on_wei_column_2"

    def test_position_follows_table_order(self, diego_table):
        index = Index(diego_table, ["mike_column", "wei_column"])
        assert index.name == "idx_diego_table_on_mike_column_1"

    def test_explicit_name_wins(self, diego_table):
        assert Index(diego_table, ["wei_column"], name="by_wei").name == "by_wei"

    def test_temp_table_prefix(self, diego_table):
        temp_table = diego_table.get_temp_table()
        assert Index(temp_table, ["wei_column", "mike_column"]).name == "temp_idx_diego_table_on_wei_column_2"
        assert Index(temp_table, ["wei_column"], name="by_wei").name == "temp_by_wei"

    def test_expression_column_needs_explicit_name(self, diego_table):
        index = Index(diego_table, ["wei_column", "lower(mike_column)"])
        assert index.generated_name is None
        with pytest.raises(InvalidArgumentError):
            index.name

    def test_qualified_name(self, diego_table):
        assert Index(diego_table, ["wei_column"]).qualified_name == '"reporting"."idx_diego_table_on_wei_column"'


# ============================================================================
# EQUIVALENCE
# ============================================================================

class TestIndexEquivalence:
    """Tests for structural comparison."""

    def test_names_ignored(self, diego_table):
        a = Index(diego_table, ["wei_column"])
        b = Index(diego_table, ["wei_column"], name="by_wei")
        assert a.equivalent(b)
        assert a != b

    def test_reflexive_and_symmetric(self, diego_table):
        a = Index(diego_table, ["wei_column", "mike_column"], unique=True)
        b = Index(diego_table, ["wei_column", "mike_column"], unique=True, name="by_pair")
        assert a.equivalent(a)
        assert a.equivalent(b) and b.equivalent(a)

    def test_same_name_is_equal(self, diego_table):
        assert Index(diego_table, ["wei_column"]) == Index(diego_table, ["wei_column"])

    def test_temp_clone_is_equivalent(self, diego_table):
        temp_table = diego_table.get_temp_table()
        assert Index(diego_table, ["wei_column"]).equivalent(Index(temp_table, ["wei_column"]))

    @pytest.mark.parametrize(
        "columns, options",
        [
            (["mike_column"], {}),
            (["mike_column", "wei_column"], {}),
            (["wei_column"], {"unique": True}),
            (["wei_column"], {"primary": True}),
        ],
    )
    def test_structural_differences(self, diego_table, columns, options):
        assert not Index(diego_table, ["wei_column"]).equivalent(Index(diego_table, columns, **options))

    def test_other_schema(self, diego_table, connection):
        elsewhere = Table("diego_table", schema="staging", columns=diego_table.columns, connection=connection)
        assert not Index(diego_table, ["wei_column"]).equivalent(Index(elsewhere, ["wei_column"]))

    def test_other_table_same_schema(self, diego_table, connection):
        other = Table("other_table", schema="reporting", columns=diego_table.columns, connection=connection)
        assert not Index(diego_table, ["wei_column"]).equivalent(Index(other, ["wei_column"]))

    def test_not_an_index(self, diego_table):
        assert not Index(diego_table, ["wei_column"]).equivalent(("wei_column",))


# ============================================================================
# DATABASE OPERATIONS
# ============================================================================

class TestIndexCreate:
    """Tests for create()."""

    def test_create_statement(self, diego_table, statements):
        Index(diego_table, ["wei_column", "mike_column"]).create()

        assert statements() == [
            'CREATE INDEX "idx_diego_table_on_wei_column_2" ON "reporting"."diego_table" (wei_column, mike_column);'
        ]

    def test_primary_is_promoted(self, diego_table, statements):
        Index(diego_table, ["wei_column"], primary=True).create()

        assert statements() == [
            'CREATE UNIQUE INDEX "idx_diego_table_on_wei_column" ON "reporting"."diego_table" (wei_column);',
            'ALTER TABLE "reporting"."diego_table" ADD PRIMARY KEY USING INDEX "idx_diego_table_on_wei_column";',
        ]

    def test_same_name_is_replaced(self, diego_table, connection, statements):
        connection.index_exists = MagicMock(return_value=True)

        Index(diego_table, ["wei_column"]).create()

        connection.index_exists.assert_called_once_with("idx_diego_table_on_wei_column", "reporting")
        assert statements() == [
            'DROP INDEX "reporting"."idx_diego_table_on_wei_column";',
            'CREATE INDEX "idx_diego_table_on_wei_column" ON "reporting"."diego_table" (wei_column);',
        ]

    def test_logs_carry_context(self, diego_table, caplog):
        caplog.set_level(logging.INFO, logger="pgswap")

        with log_context(schema="reporting", table="diego_table", operation="create_indexes"):
            Index(diego_table, ["wei_column"]).create()

        assert caplog.records
        assert all(record.context["operation"] == "create_indexes" for record in caplog.records)

    def test_partial_index(self, diego_table, statements):
        Index(diego_table, ["wei_column"], where="wei_column IS NOT NULL").create()

        assert statements()[-1].endswith("(wei_column) WHERE wei_column IS NOT NULL;")


class TestIndexOperations:
    """Tests for drop(), rename(), exists() and fetch()."""

    def test_drop(self, diego_table, statements):
        Index(diego_table, ["wei_column"]).drop(check_exists=True)

        assert statements() == ['DROP INDEX IF EXISTS "reporting"."idx_diego_table_on_wei_column";']

    def test_rename_returns_new_descriptor(self, diego_table, statements):
        index = Index(diego_table, ["wei_column"])

        renamed = index.rename("by_wei")

        assert statements() == ['ALTER INDEX "reporting"."idx_diego_table_on_wei_column" RENAME TO "by_wei";']
        assert renamed.name == "by_wei"
        assert index.name == "idx_diego_table_on_wei_column"

    def test_rename_on_temp_table_reports_new_name(self, diego_table, statements):
        temp_index = Index(diego_table.get_temp_table(), ["wei_column"])

        renamed = temp_index.rename("idx_diego_table_on_wei_column")

        assert statements() == [
            'ALTER INDEX "reporting"."temp_idx_diego_table_on_wei_column" RENAME TO "idx_diego_table_on_wei_column";'
        ]
        assert renamed.name == "idx_diego_table_on_wei_column"
        assert temp_index.name == "temp_idx_diego_table_on_wei_column"

    def test_rename_on_temp_table_to_prefixed_name(self, diego_table):
        renamed = Index(diego_table.get_temp_table(), ["wei_column"]).rename("temp_by_wei")

        assert renamed.name == "temp_by_wei"
        assert renamed.explicit_name == "by_wei"

    def test_fetch_on_temp_table_keeps_catalog_name(self, diego_table, connection, statements):
        connection.fetch_index_info = MagicMock(return_value={"oid": 4242, "unique": False, "primary": False})
        connection.fetch_index_column_names = MagicMock(return_value=["wei_column"])

        index = Index.fetch(connection, diego_table.get_temp_table(), "temp_idx_diego_table_on_wei_column")
        index.drop()

        assert index.name == "temp_idx_diego_table_on_wei_column"
        assert statements() == ['DROP INDEX "reporting"."temp_idx_diego_table_on_wei_column";']

    def test_fetch_unprefixed_name_on_temp_table(self, diego_table, connection):
        connection.fetch_index_info = MagicMock(return_value={"oid": 4242, "unique": False, "primary": False})
        connection.fetch_index_column_names = MagicMock(return_value=["wei_column"])

        index = Index.fetch(connection, diego_table.get_temp_table(), "by_wei")

        assert index.name == "by_wei"

    def test_exists_matches_columns_not_names(self, diego_table):
        diego_table.fetch_indexes = MagicMock(return_value=[Index(diego_table, ["wei_column"], name="legacy")])

        assert Index(diego_table, ["wei_column"]).exists()
        assert not Index(diego_table, ["mike_column"]).exists()

    def test_fetch(self, diego_table, connection):
        connection.fetch_index_info = MagicMock(return_value={"oid": 4242, "unique": True, "primary": False})
        connection.fetch_index_column_names = MagicMock(return_value=["wei_column", "mike_column"])

        index = Index.fetch(connection, diego_table, "by_pair")

        connection.fetch_index_info.assert_called_once_with("by_pair", "reporting")
        connection.fetch_index_column_names.assert_called_once_with(4242)
        assert index.name == "by_pair"
        assert index.column_names == ("wei_column", "mike_column")
        assert index.unique and not index.primary

    def test_fetch_missing(self, diego_table, connection):
        with pytest.raises(NotFoundError):
            Index.fetch(connection, diego_table, "nope")


class TestIndexDescriptor:
    """Tests for to_descriptor()."""

    def test_generated_name_omitted(self, diego_table):
        assert Index(diego_table, ["wei_column", "mike_column"], unique=True).to_descriptor() == {
            "table_name": "diego_table",
            "schema": "reporting",
            "columns": ["wei_column", "mike_column"],
            "unique": True,
        }

    def test_explicit_name_and_primary(self, diego_table):
        descriptor = Index(diego_table, ["wei_column"], name="pk_diego", primary=True).to_descriptor()

        assert descriptor["name"] == "pk_diego"
        assert descriptor["primary"] is True
        assert "unique" not in descriptor

    def test_explicit_name_equal_to_generated_omitted(self, diego_table):
        descriptor = Index(diego_table, ["wei_column"], name="idx_diego_table_on_wei_column").to_descriptor()

        assert "name" not in descriptor
