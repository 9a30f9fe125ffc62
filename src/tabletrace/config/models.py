"""Pydantic models for tabletrace configuration.

All configuration validation happens through these models.

Classes:
    FilterConfig: Table include/exclude rules
    HistoryConfig: Durable schema history storage
    LoggingSettings: Logging configuration
    ConnectorConfig: Top-level configuration for one connector instance
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from tabletrace.schema.converters import DecimalHandlingMode


class FilterConfig(BaseModel, frozen=True):
    """Table filtering rules.

    Attributes:
        table_include_list: Regexes for tables to capture. Empty means all.
        table_exclude_list: Regexes for tables never to capture.
        exclude_system_tables: Whether system schemas are always skipped.
    """

    table_include_list: tuple[str, ...] = ()
    table_exclude_list: tuple[str, ...] = ()
    exclude_system_tables: bool = True

    @field_validator("table_include_list", "table_exclude_list", mode="before")
    @classmethod
    def split_comma_separated(cls, v: object) -> object:
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return tuple(item.strip() for item in v.split(",") if item.strip())
        return v


class HistoryConfig(BaseModel, frozen=True):
    """Schema history storage configuration.

    Attributes:
        database_path: Path to the SQLite history database (relative to config dir).
        retry_attempts: Attempts per history append before giving up.
        retry_timeout: Total seconds allowed for retrying one append.
    """

    database_path: str = "data/schema_history.db"
    retry_attempts: int = Field(default=3, ge=1)
    retry_timeout: float = Field(default=10.0, gt=0.0)


class LoggingSettings(BaseModel, frozen=True):
    """Logging configuration.

    Attributes:
        level: Log level.
        mode: dev for console output, prod for JSON.
        log_dir: Directory for log files (relative to config dir).
        enable_file_logging: Whether logs are also written to files.
    """

    level: Literal["debug", "info", "warning", "error"] = "info"
    mode: Literal["dev", "prod"] = "dev"
    log_dir: str = "logs"
    enable_file_logging: bool = True


class ConnectorConfig(BaseModel, frozen=True):
    """Top-level configuration of one connector instance.

    Attributes:
        database_name: Source database whose tables are captured.
        server_name: Logical server name, prefix of derived schema names.
        filters: Table filtering rules.
        decimal_handling_mode: How decimal columns are represented.
        history: Schema history storage.
        logging: Logging configuration.
    """

    database_name: str = Field(min_length=1)
    server_name: str = Field(min_length=1)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    decimal_handling_mode: DecimalHandlingMode = DecimalHandlingMode.PRECISE
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("decimal_handling_mode", mode="before")
    @classmethod
    def parse_decimal_handling_mode(cls, v: object) -> object:
        """Accept mode names in any case."""
        if isinstance(v, str):
            return DecimalHandlingMode.parse(v)
        return v


def get_default_config() -> ConnectorConfig:
    """Get a configuration template with placeholder connection names."""
    return ConnectorConfig(database_name="inventory", server_name="server1")


def get_config_dir() -> Path:
    """Get the tabletrace configuration directory path (~/.tabletrace/)."""
    return Path.home() / ".tabletrace"
