"""tabletrace core module - shared types and errors."""

from tabletrace.core.errors import (
    CaptureResolutionError,
    ConfigError,
    PersistenceError,
    SchemaChangeContractError,
    TabletraceError,
    ValidationError,
)
from tabletrace.core.types import Result

__all__ = [
    # Types
    "Result",
    # Errors
    "TabletraceError",
    "ConfigError",
    "PersistenceError",
    "CaptureResolutionError",
    "ValidationError",
    "SchemaChangeContractError",
]
