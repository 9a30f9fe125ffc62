"""Error hierarchy for tabletrace.

Exceptions are used for programming errors and fatal initialization
failures. Expected failures (a history append that did not reach durable
storage) travel as the error side of a Result instead.

Exception Hierarchy:
    TabletraceError (base)
    ├── ConfigError              - Configuration loading and validation issues
    ├── PersistenceError         - Schema history storage issues
    ├── CaptureResolutionError   - Capture set could not be determined
    └── ValidationError          - Invalid values and contract violations
        └── SchemaChangeContractError - Event does not carry exactly one table
"""

from __future__ import annotations

from typing import Any


class TabletraceError(Exception):
    """Base exception for all tabletrace errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigError(TabletraceError):
    """Error from configuration operations.

    Attributes:
        config_key: The configuration key that caused the error.
        config_file: Path to the config file if applicable.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        config_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.config_key = config_key
        self.config_file = config_file


class PersistenceError(TabletraceError):
    """Error from schema history storage operations.

    Attributes:
        operation: The operation that failed (e.g., "insert", "select").
        table: The database table involved if applicable.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        table: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
        self.table = table


class CaptureResolutionError(TabletraceError):
    """The set of captured tables could not be determined.

    Raised while a connector instance is being constructed, when the table
    listing cannot be read from the source database. It is fatal: no
    partially resolved capture set is ever exposed.

    Attributes:
        database: Name of the database whose tables were being listed.
    """

    def __init__(
        self,
        message: str,
        *,
        database: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.database = database

    @classmethod
    def from_exception(
        cls, exc: Exception, *, database: str | None = None
    ) -> CaptureResolutionError:
        """Wrap a table listing failure.

        Args:
            exc: The exception raised by the table lister.
            database: Name of the database being listed.

        Returns:
            A CaptureResolutionError with __cause__ set to the original exception.
        """
        error = cls(
            "Could not obtain the list of captured tables",
            database=database,
            details={"original_exception": type(exc).__name__, "reason": str(exc)},
        )
        error.__cause__ = exc
        return error


class ValidationError(TabletraceError):
    """Error from data validation operations.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value

    def __str__(self) -> str:
        """Return string representation including the offending field."""
        base = self.message
        if self.field:
            base = f"{base} (field: {self.field}, value: {self.value!r})"
        if self.details:
            base = f"{base} (details: {self.details})"
        return base


class SchemaChangeContractError(ValidationError):
    """A schema change event did not carry exactly one table.

    Events are split per table before they reach the applier, so anything
    else is a bug upstream. The event is rejected without touching the
    registry.

    Attributes:
        table_count: Number of tables the event carried.
    """

    def __init__(
        self,
        message: str,
        *,
        table_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, field="tables", value=table_count, details=details)
        self.table_count = table_count
