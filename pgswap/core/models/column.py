# ============================================================================
# COLUMN MODEL
# ============================================================================
# STATUS: Core model - Column descriptor
# PURPOSE: Immutable description of one table column and its raw sibling
# CREATED: 18 OCT 2026
# EXPORTS: Column, RawColumn
# DEPENDENCIES: pydantic
# ============================================================================
"""
Column Model

A Column is an immutable value identified by its name within a table.

A column may carry a `pg_raw` attachment: a request for a sibling column
named `<name>_raw` that stores the untransformed source value. The sibling
is synthesized when DDL/DML is built and is never stored on the table's
column list.

    Column(name="price", data_type="NUMERIC(12,2)", pg_raw={"data_type": "TEXT", "is_nullable": True})
    # -> "price" NUMERIC(12,2) NOT NULL, "price_raw" TEXT
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pgswap.core.errors import InvalidArgumentError
from pgswap.core.schema.sql_builder import DEFAULT_DATA_TYPE

_SEQUENCE_DEFAULT = re.compile(r"nextval.*::regclass")


class RawColumn(BaseModel):
    """Type overrides for a synthesized `<name>_raw` column."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data_type: Optional[str] = None
    is_nullable: Optional[bool] = None
    expression: Optional[str] = Field(
        default=None,
        description="Source expression used by loaders; not part of the DDL",
    )


class Column(BaseModel):
    """
    One column of a table descriptor.

    Accepts the catalog/JSON key names (column_name, column_default) as
    well as the attribute names.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str = Field(alias="column_name", min_length=1)
    data_type: str = DEFAULT_DATA_TYPE
    is_nullable: bool = False
    default: Optional[Union[str, int, float, bool]] = Field(
        default=None,
        alias="column_default",
        description="SQL default passed through verbatim; quote literals yourself",
    )
    constraints: Tuple[str, ...] = ()
    pg_raw: Union[bool, RawColumn, None] = None

    @classmethod
    def coerce(cls, value: Union["Column", Mapping[str, Any]]) -> "Column":
        """Accept a Column or a descriptor mapping."""
        if isinstance(value, Column):
            return value
        if not isinstance(value, Mapping):
            raise InvalidArgumentError(f"Not a column descriptor: {value!r}", value=value)
        try:
            return cls.model_validate(dict(value))
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid column descriptor {dict(value)!r}: {e}", value=value) from e

    @property
    def has_sequence_default(self) -> bool:
        return isinstance(self.default, str) and bool(_SEQUENCE_DEFAULT.search(self.default))

    def raw_column(self) -> Optional["Column"]:
        """
        Build the `<name>_raw` sibling, or None when pg_raw is unset/false.

        Type and nullability are copied from a RawColumn attachment when
        given; otherwise the sibling uses the column defaults.
        """
        if not self.pg_raw:
            return None

        fields: Dict[str, Any] = {"name": f"{self.name}_raw"}
        if isinstance(self.pg_raw, RawColumn):
            if self.pg_raw.data_type is not None:
                fields["data_type"] = self.pg_raw.data_type
            if self.pg_raw.is_nullable is not None:
                fields["is_nullable"] = self.pg_raw.is_nullable
        return Column(**fields)

    def without_default(self) -> "Column":
        return self.model_copy(update={"default": None})

    def to_descriptor(self) -> Dict[str, Any]:
        """Serialize with the catalog key names, dropping unset fields."""
        descriptor = self.model_dump(by_alias=True, exclude_none=True)
        if not descriptor.get("constraints"):
            descriptor.pop("constraints", None)
        else:
            descriptor["constraints"] = list(descriptor["constraints"])
        return descriptor


def inject_raw_columns(columns: Iterable[Column]) -> List[Column]:
    """Expand a column list, placing each `<name>_raw` sibling right after its column."""
    expanded = []
    for column in columns:
        expanded.append(column)
        raw = column.raw_column()
        if raw is not None:
            expanded.append(raw)
    return expanded


__all__ = ["Column", "RawColumn", "inject_raw_columns"]
