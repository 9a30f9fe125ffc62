"""Unit tests for tabletrace.schema.naming module."""

import pytest

from tabletrace.schema.naming import SchemaNameAdjuster


class TestSchemaNameAdjuster:
    """Test name adjustment."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("server1.dbo.orders", "server1.dbo.orders"),
            ("server1.dbo.order-items", "server1.dbo.order_items"),
            ("server1.dbo.Order Lines", "server1.dbo.Order_Lines"),
            ("1server.dbo.t", "_1server.dbo.t"),
        ],
    )
    def test_adjust(self, name: str, expected: str) -> None:
        assert SchemaNameAdjuster().adjust(name) == expected

    def test_custom_replacement(self) -> None:
        assert SchemaNameAdjuster(replacement="x").adjust("a-b") == "axb"
