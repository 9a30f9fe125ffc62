"""Observability module for tabletrace.

Provides structured logging via structlog: configure_logging, get_logger,
bind_context and unbind_context.
"""

from tabletrace.observability.logging import (
    LoggingConfig,
    LogMode,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    set_console_logging,
    unbind_context,
)

__all__ = [
    "LogMode",
    "LoggingConfig",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "set_console_logging",
    "unbind_context",
]
