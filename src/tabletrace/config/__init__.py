"""Configuration module for tabletrace.

Usage:
    from tabletrace.config import load_config

    config = load_config()
    config.filters.table_include_list
"""

from tabletrace.config.loader import (
    create_default_config,
    ensure_config_dir,
    load_config,
    resolve_config_path,
)
from tabletrace.config.models import (
    ConnectorConfig,
    FilterConfig,
    HistoryConfig,
    LoggingSettings,
    get_config_dir,
    get_default_config,
)

__all__ = [
    # Models
    "ConnectorConfig",
    "FilterConfig",
    "HistoryConfig",
    "LoggingSettings",
    # Loader functions
    "load_config",
    "create_default_config",
    "ensure_config_dir",
    "resolve_config_path",
    # Model helpers
    "get_config_dir",
    "get_default_config",
]
