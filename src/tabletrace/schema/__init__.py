"""Schema registry, derived schemas and schema change application."""

from tabletrace.schema.applier import SchemaChangeApplier
from tabletrace.schema.builder import DerivedSchema, FieldSchema, SchemaBuilder, TableSchemaBuilder
from tabletrace.schema.converters import DecimalHandlingMode, ValueConverters
from tabletrace.schema.database_schema import DatabaseSchema, default_schema_builder
from tabletrace.schema.naming import SchemaNameAdjuster
from tabletrace.schema.registry import RegistryEntry, SchemaRegistry, SchemaVersion

__all__ = [
    "DatabaseSchema",
    "DecimalHandlingMode",
    "DerivedSchema",
    "FieldSchema",
    "RegistryEntry",
    "SchemaBuilder",
    "SchemaChangeApplier",
    "SchemaNameAdjuster",
    "SchemaRegistry",
    "SchemaVersion",
    "TableSchemaBuilder",
    "ValueConverters",
    "default_schema_builder",
]
