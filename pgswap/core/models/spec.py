# ============================================================================
# TABLE SPECIFICATION MODEL
# ============================================================================
# STATUS: Core model - Stored table specifications
# PURPOSE: Validate table/index descriptors loaded from JSON or dicts
# CREATED: 18 OCT 2026
# EXPORTS: IndexSpec, TableSpec
# DEPENDENCIES: pydantic
# ============================================================================
"""
Table Specification Model

A TableSpec is the persisted form of a table descriptor:

    {
        "table_name": "countries",
        "schema_name": "reporting",
        "unlogged": false,
        "columns": [
            {"column_name": "code", "data_type": "CHAR(2)"},
            {"column_name": "name", "is_nullable": true, "pg_raw": true}
        ],
        "indexes": [
            {"columns": ["code"], "primary": true},
            {"columns": ["name"], "where": "name IS NOT NULL"}
        ]
    }

Unknown keys are rejected.
"""

from pathlib import Path
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from pgswap.core.errors import InvalidArgumentError, NotFoundError
from pgswap.core.models.column import Column


class IndexSpec(BaseModel):
    """Index descriptor as stored in a table specification."""

    model_config = ConfigDict(extra="forbid")

    columns: List[str] = Field(min_length=1)
    name: Optional[str] = None
    primary: bool = False
    unique: bool = False
    where: Optional[str] = None


class TableSpec(BaseModel):
    """Table descriptor as stored on disk."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    table_name: Optional[str] = None
    schema_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("schema_name", "schema"),
    )
    columns: List[Column] = Field(default_factory=list)
    indexes: List[IndexSpec] = Field(default_factory=list)
    unlogged: Optional[bool] = None
    temp: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "TableSpec":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid table specification: {e}") from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TableSpec":
        """
        Load a specification from a JSON file.

        Raises:
            NotFoundError: If the file does not exist
            InvalidArgumentError: If the JSON does not describe a table
        """
        path = Path(path)
        if not path.is_file():
            raise NotFoundError(f"Table specification {path} does not exist", relation=path.stem)
        try:
            return cls.model_validate_json(path.read_text())
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid table specification {path}: {e}") from e


__all__ = ["IndexSpec", "TableSpec"]
