"""Logical value types for vendor column types.

Maps SQL Server column type names to the logical types used in derived
schemas. Decimal columns follow the configured DecimalHandlingMode.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import structlog

from tabletrace.core.errors import ConfigError
from tabletrace.relational.table import Column

log = structlog.get_logger()


class DecimalHandlingMode(StrEnum):
    """Representation of decimal and money columns in derived schemas."""

    PRECISE = "precise"
    DOUBLE = "double"
    STRING = "string"

    @classmethod
    def parse(cls, value: str) -> DecimalHandlingMode:
        """Parse a mode name case-insensitively.

        Raises:
            ConfigError: If the name is not a known mode.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise ConfigError(
                f"Unknown decimal handling mode '{value}'",
                config_key="decimal_handling_mode",
                details={"allowed": [mode.value for mode in cls]},
            ) from e


DECIMAL_TYPES = frozenset({"decimal", "numeric", "money", "smallmoney"})

# Default precision and scale of the money types
_MONEY_PRECISION = {"money": (19, 4), "smallmoney": (10, 4)}

_LOGICAL_TYPES: dict[str, str] = {
    "bit": "boolean",
    "tinyint": "int16",
    "smallint": "int16",
    "int": "int32",
    "integer": "int32",
    "bigint": "int64",
    "real": "float32",
    "float": "float64",
    "char": "string",
    "varchar": "string",
    "text": "string",
    "nchar": "string",
    "nvarchar": "string",
    "ntext": "string",
    "xml": "string",
    "sysname": "string",
    "uniqueidentifier": "uuid",
    "binary": "bytes",
    "varbinary": "bytes",
    "image": "bytes",
    "timestamp": "bytes",
    "rowversion": "bytes",
    "date": "date",
    "time": "time",
    "datetime": "timestamp",
    "datetime2": "timestamp",
    "smalldatetime": "timestamp",
    "datetimeoffset": "zoned_timestamp",
}


class ValueConverters:
    """Resolves the logical type and parameters of each column.

    Usage:
        converters = ValueConverters(DecimalHandlingMode.STRING)
        converters.logical_type(column)  # "string" for a decimal column
    """

    def __init__(self, decimal_mode: DecimalHandlingMode = DecimalHandlingMode.PRECISE) -> None:
        self.decimal_mode = decimal_mode
        self._unmapped_reported: set[str] = set()

    @staticmethod
    def _base_type(column: Column) -> str:
        return column.type_name.split("(")[0].strip().lower()

    def logical_type(self, column: Column) -> str:
        base_type = self._base_type(column)

        if base_type in DECIMAL_TYPES:
            if self.decimal_mode is DecimalHandlingMode.DOUBLE:
                return "float64"
            if self.decimal_mode is DecimalHandlingMode.STRING:
                return "string"
            return "decimal"

        logical = _LOGICAL_TYPES.get(base_type)
        if logical is None:
            if base_type not in self._unmapped_reported:
                self._unmapped_reported.add(base_type)
                log.warning(
                    "schema.type.unmapped",
                    type_name=column.type_name,
                    fallback="string",
                )
            return "string"
        return logical

    def parameters(self, column: Column) -> dict[str, Any]:
        """Extra schema parameters, such as precision and scale of decimals."""
        base_type = self._base_type(column)
        if base_type not in DECIMAL_TYPES or self.decimal_mode is not DecimalHandlingMode.PRECISE:
            return {}

        precision, scale = _MONEY_PRECISION.get(base_type, (column.length, column.scale))
        parameters: dict[str, Any] = {"scale": scale if scale is not None else 0}
        if precision is not None:
            parameters["precision"] = precision
        return parameters
