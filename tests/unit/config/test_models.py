"""Unit tests for tabletrace.config.models module."""

from pydantic import ValidationError
import pytest

from tabletrace.config.models import (
    ConnectorConfig,
    FilterConfig,
    HistoryConfig,
    get_default_config,
)
from tabletrace.core.errors import ConfigError
from tabletrace.schema.converters import DecimalHandlingMode


class TestFilterConfig:
    """Test FilterConfig."""

    def test_defaults(self) -> None:
        config = FilterConfig()
        assert config.table_include_list == ()
        assert config.table_exclude_list == ()
        assert config.exclude_system_tables

    def test_comma_separated_string(self) -> None:
        config = FilterConfig(table_include_list=r"dbo\.orders, dbo\.customers,")
        assert config.table_include_list == (r"dbo\.orders", r"dbo\.customers")

    def test_list_value(self) -> None:
        config = FilterConfig(table_exclude_list=[r"dbo\.tmp_.*"])
        assert config.table_exclude_list == (r"dbo\.tmp_.*",)


class TestHistoryConfig:
    """Test HistoryConfig bounds."""

    def test_retry_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            HistoryConfig(retry_attempts=0)

    def test_retry_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            HistoryConfig(retry_timeout=0)


class TestConnectorConfig:
    """Test ConnectorConfig."""

    def test_default_config(self) -> None:
        config = get_default_config()
        assert config.database_name == "inventory"
        assert config.server_name == "server1"
        assert config.decimal_handling_mode is DecimalHandlingMode.PRECISE

    def test_names_are_required(self) -> None:
        with pytest.raises(ValidationError):
            ConnectorConfig(database_name="", server_name="server1")

    def test_decimal_mode_any_case(self) -> None:
        config = ConnectorConfig(
            database_name="inventory", server_name="server1", decimal_handling_mode="STRING"
        )
        assert config.decimal_handling_mode is DecimalHandlingMode.STRING

    def test_unknown_decimal_mode(self) -> None:
        with pytest.raises(ConfigError):
            ConnectorConfig(
                database_name="inventory", server_name="server1", decimal_handling_mode="exact"
            )

    def test_frozen(self) -> None:
        config = get_default_config()
        with pytest.raises(ValidationError):
            config.server_name = "other"  # type: ignore[misc]
