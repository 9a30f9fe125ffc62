"""Structural table definitions.

A Table is produced fully formed by the DDL-resolution side of the
connector. Definitions are frozen: a change to a table produces a new
Table that replaces the old one in the registry.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from tabletrace.relational.table_id import TableId


class Column(BaseModel, frozen=True):
    """A single column of a table.

    Attributes:
        name: Column name.
        type_name: Vendor type name (e.g., "nvarchar", "datetime2").
        position: 1-based ordinal position within the table.
        length: Length or precision, if the type has one.
        scale: Scale for numeric types.
        optional: Whether the column accepts NULL.
        auto_incremented: Whether the column is an identity column.
        generated: Whether the column is computed.
        default_value: Default value expression, as text.
        charset: Character set for character columns.
    """

    name: str = Field(min_length=1)
    type_name: str = Field(min_length=1)
    position: int = Field(ge=1)
    length: int | None = None
    scale: int | None = None
    optional: bool = True
    auto_incremented: bool = False
    generated: bool = False
    default_value: str | None = None
    charset: str | None = None


class Table(BaseModel, frozen=True):
    """Structural definition of a table.

    Attributes:
        id: Qualified table identifier.
        columns: Columns in position order.
        primary_key_columns: Names of the primary key columns, in key order.
        default_charset: Default character set of the table.
        comment: Table comment, if any.
    """

    id: TableId
    columns: tuple[Column, ...] = ()
    primary_key_columns: tuple[str, ...] = ()
    default_charset: str | None = None
    comment: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def parse_table_id(cls, v: Any) -> Any:
        """Accept dotted identifiers as well as TableId values."""
        if isinstance(v, str):
            return TableId.parse(v)
        return v

    @field_validator("columns")
    @classmethod
    def sort_columns(cls, v: tuple[Column, ...]) -> tuple[Column, ...]:
        """Keep columns in ordinal position order."""
        return tuple(sorted(v, key=lambda column: column.position))

    @model_validator(mode="after")
    def validate_columns(self) -> Table:
        """Column names are unique and primary key columns exist."""
        seen: set[str] = set()
        for column in self.columns:
            key = column.name.lower()
            if key in seen:
                msg = f"Duplicate column '{column.name}' in table {self.id}"
                raise ValueError(msg)
            seen.add(key)

        for name in self.primary_key_columns:
            if name.lower() not in seen:
                msg = f"Primary key column '{name}' is not a column of table {self.id}"
                raise ValueError(msg)
        return self

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def column_named(self, name: str) -> Column | None:
        """Look up a column by name, ignoring case."""
        wanted = name.lower()
        for column in self.columns:
            if column.name.lower() == wanted:
                return column
        return None

    def primary_key(self) -> tuple[Column, ...]:
        """Primary key columns in key order."""
        columns = (self.column_named(name) for name in self.primary_key_columns)
        return tuple(column for column in columns if column is not None)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation, used by the schema history."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Table:
        """Rebuild a table from `to_dict()` output."""
        return cls.model_validate(data)
