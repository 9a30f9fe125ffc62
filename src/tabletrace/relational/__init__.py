"""Relational model: table identifiers, definitions, filters and change events."""

from tabletrace.relational.changes import (
    SchemaChangeEvent,
    SchemaChangeEventType,
    TableChange,
    TableChanges,
    TableChangeType,
)
from tabletrace.relational.filters import PredicateTableFilter, RegexTableFilter, TableFilter
from tabletrace.relational.table import Column, Table
from tabletrace.relational.table_id import TableId

__all__ = [
    "Column",
    "PredicateTableFilter",
    "RegexTableFilter",
    "SchemaChangeEvent",
    "SchemaChangeEventType",
    "Table",
    "TableChange",
    "TableChangeType",
    "TableChanges",
    "TableFilter",
    "TableId",
]
