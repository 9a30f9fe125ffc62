"""Structured logging configuration for tabletrace.

Configures structlog with a shared processor chain. Development mode renders
human-readable console output, production mode renders JSON. When file
logging is on, every rendered entry is also written to a daily rotating
log file, and warnings from libraries using the standard logging module
(SQLAlchemy, aiosqlite) land in the same file.

Standard log keys:
- table_id: Qualified identifier of the table being handled
- change_type: Kind of schema change (create, alter, drop, ...)
- from_snapshot: Whether the change originated from the initial snapshot
- database: Source database name

Event naming convention:
- Use dot.notation, domain.entity.verb_past_tense
  (e.g., "capture.table.skipped", "schema.change.applied")

Usage:
    from tabletrace.observability import LoggingConfig, configure_logging, get_logger

    configure_logging(LoggingConfig.from_settings(config.logging, config_path.parent))
    log = get_logger(__name__)
    log.info("schema.change.applied", table_id="inventory.dbo.orders")
"""

from __future__ import annotations

from enum import Enum
from functools import partialmethod
import logging
from logging.handlers import TimedRotatingFileHandler
import os
from pathlib import Path
import sys
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field
import structlog

if TYPE_CHECKING:
    from tabletrace.config.models import LoggingSettings

LOG_FILE_NAME = "tabletrace.log"
REDACTED = "<REDACTED>"

# Substrings marking keys whose values are never logged in clear text
SENSITIVE_FIELD_NAMES = frozenset(
    {"password", "passwd", "secret", "token", "credential", "api_key", "private_key"}
)

# Keys added by the processor chain itself
_RESERVED_KEYS = frozenset({"event", "level", "timestamp", "filename", "lineno"})


class LogMode(str, Enum):
    """Logging output mode."""

    DEV = "dev"
    PROD = "prod"


class LoggingConfig(BaseModel, frozen=True):
    """Configuration for structured logging.

    Attributes:
        mode: Output mode (dev for human-readable, prod for JSON).
        log_level: Minimum log level to output.
        log_dir: Directory for log files. Defaults to ~/.tabletrace/logs/.
        max_log_days: Number of daily log files to keep.
        enable_file_logging: Whether to write logs to files.
    """

    mode: LogMode = LogMode.DEV
    log_level: str = "INFO"
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".tabletrace" / "logs")
    max_log_days: int = Field(default=7, ge=1, le=365)
    enable_file_logging: bool = True

    @classmethod
    def from_settings(
        cls, settings: LoggingSettings, base_dir: Path, *, debug: bool = False
    ) -> LoggingConfig:
        """Build from the `logging` section of a connector configuration.

        Args:
            settings: Logging settings from the connector configuration.
            base_dir: Directory a relative log_dir is resolved against.
            debug: Force DEBUG level regardless of settings.level.
        """
        log_dir = Path(settings.log_dir).expanduser()
        if not log_dir.is_absolute():
            log_dir = base_dir / log_dir
        return cls(
            mode=LogMode(settings.mode),
            log_level="DEBUG" if debug else settings.level.upper(),
            log_dir=log_dir,
            enable_file_logging=settings.enable_file_logging,
        )


_configured = False
_current_config: LoggingConfig | None = None
_file_handler: TimedRotatingFileHandler | None = None
_console_enabled = True


def _mode_from_env() -> LogMode:
    if os.environ.get("TABLETRACE_LOG_MODE", "").strip().lower() == LogMode.PROD.value:
        return LogMode.PROD
    return LogMode.DEV


def _level_number(name: str) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(name in lowered for name in SENSITIVE_FIELD_NAMES)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if _is_sensitive(str(key)) else _redact(item)
            for key, item in value.items()
        }
    return value


def _mask_sensitive_data(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask credentials, including those nested in connection or source metadata."""
    for key in event_dict.keys() - _RESERVED_KEYS:
        event_dict[key] = REDACTED if _is_sensitive(key) else _redact(event_dict[key])
    return event_dict


def _build_processors(mode: LogMode) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _mask_sensitive_data,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]
    if mode is LogMode.DEV:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )
    return processors


def _open_file_handler(config: LoggingConfig) -> TimedRotatingFileHandler:
    config.log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=str(config.log_dir / LOG_FILE_NAME),
        when="midnight",
        backupCount=config.max_log_days,
        encoding="utf-8",
        utc=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(_level_number(config.log_level))
    return handler


def _detach_file_handler() -> None:
    global _file_handler
    if _file_handler is not None:
        logging.getLogger().removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None


class _ConsoleAndFileSink:
    """structlog logger writing rendered entries to stderr and the log file."""

    def __init__(self, file_handler: TimedRotatingFileHandler | None) -> None:
        self._file_handler = file_handler

    def _write(self, level: int, message: str) -> None:
        if _console_enabled:
            print(message, file=sys.stderr, flush=True)
        if self._file_handler is not None:
            self._file_handler.emit(
                logging.makeLogRecord(
                    {
                        "name": "tabletrace",
                        "levelno": level,
                        "levelname": logging.getLevelName(level),
                        "msg": message,
                    }
                )
            )

    debug = partialmethod(_write, logging.DEBUG)
    info = msg = partialmethod(_write, logging.INFO)
    warning = warn = partialmethod(_write, logging.WARNING)
    error = exception = partialmethod(_write, logging.ERROR)
    critical = fatal = partialmethod(_write, logging.CRITICAL)


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Configure structlog for the application.

    Calling it again replaces the previous configuration and closes the
    previous log file.

    Args:
        config: Logging configuration. If None, uses defaults with the mode
            taken from the TABLETRACE_LOG_MODE environment variable.
    """
    global _configured, _current_config, _file_handler

    if config is None:
        config = LoggingConfig(mode=_mode_from_env())

    _detach_file_handler()
    if config.enable_file_logging:
        _file_handler = _open_file_handler(config)
        logging.getLogger().addHandler(_file_handler)

    sink = _ConsoleAndFileSink(_file_handler)
    structlog.configure(
        processors=_build_processors(config.mode),
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(config.log_level)),
        context_class=dict,
        logger_factory=lambda *_args: sink,
        cache_logger_on_first_use=True,
    )

    _current_config = config
    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger, configuring defaults on first use."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)


def set_console_logging(enabled: bool) -> None:
    """Enable or disable console log output. File output is unaffected."""
    global _console_enabled
    _console_enabled = enabled


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in every subsequent log entry.

    Example:
        bind_context(database="inventory", server_name="prod-sql")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_current_config() -> LoggingConfig | None:
    return _current_config


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Forget the current configuration. Intended for tests."""
    global _configured, _current_config
    _detach_file_handler()
    _configured = False
    _current_config = None
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
