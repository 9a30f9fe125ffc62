"""Derived, output-facing schemas for captured tables.

The derived schema is what downstream consumers see: adjusted names and
logical value types instead of vendor column types.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, Field

from tabletrace.relational.table import Column, Table
from tabletrace.relational.table_id import TableId
from tabletrace.schema.converters import ValueConverters
from tabletrace.schema.naming import SchemaNameAdjuster


class FieldSchema(BaseModel, frozen=True):
    """A single field of a derived schema.

    Attributes:
        name: Adjusted field name.
        logical_type: Logical value type (e.g., "int32", "decimal").
        optional: Whether the field may be null.
        parameters: Type parameters such as precision and scale.
    """

    name: str
    logical_type: str
    optional: bool = True
    parameters: dict[str, Any] = Field(default_factory=dict)


class DerivedSchema(BaseModel, frozen=True):
    """Published key and value schema of one table.

    Attributes:
        table_id: Table the schema was derived from.
        name: Adjusted schema name, `<server>.<schema>.<table>`.
        key_fields: Fields of the key, from the primary key columns.
        value_fields: Fields of the value, one per column.
    """

    table_id: TableId
    name: str
    key_fields: tuple[FieldSchema, ...] = ()
    value_fields: tuple[FieldSchema, ...] = ()

    @property
    def key_schema_name(self) -> str:
        return f"{self.name}.Key"

    @property
    def value_schema_name(self) -> str:
        return f"{self.name}.Value"


class SchemaBuilder(Protocol):
    """Builds the derived schema of a table. Total and side-effect free."""

    def build(self, table: Table) -> DerivedSchema:
        """Derive the published schema of a table."""
        ...


class TableSchemaBuilder:
    """Default SchemaBuilder: adjusted names plus logical value types.

    Example:
        builder = TableSchemaBuilder(ValueConverters(), SchemaNameAdjuster(), "server1")
        schema = builder.build(table)
        schema.value_schema_name  # "server1.dbo.orders.Value"
    """

    def __init__(
        self,
        value_converters: ValueConverters,
        name_adjuster: SchemaNameAdjuster,
        server_name: str,
    ) -> None:
        self._converters = value_converters
        self._adjuster = name_adjuster
        self._server_name = server_name

    def _field(self, column: Column) -> FieldSchema:
        return FieldSchema(
            name=self._adjuster.adjust(column.name),
            logical_type=self._converters.logical_type(column),
            optional=column.optional,
            parameters=self._converters.parameters(column),
        )

    def build(self, table: Table) -> DerivedSchema:
        parts = (self._server_name, table.id.schema, table.id.table)
        name = ".".join(part for part in parts if part)
        return DerivedSchema(
            table_id=table.id,
            name=self._adjuster.adjust(name),
            key_fields=tuple(self._field(column) for column in table.primary_key()),
            value_fields=tuple(self._field(column) for column in table.columns),
        )
