"""Unit tests for tabletrace.relational.table_id module."""

import pytest

from tabletrace.core.errors import ValidationError
from tabletrace.relational.table_id import TableId


class TestTableIdParse:
    """Test TableId.parse()."""

    def test_three_parts(self) -> None:
        assert TableId.parse("inventory.dbo.orders") == TableId("inventory", "dbo", "orders")

    def test_two_parts(self) -> None:
        assert TableId.parse("dbo.orders") == TableId(None, "dbo", "orders")

    def test_one_part(self) -> None:
        assert TableId.parse("orders") == TableId(None, None, "orders")

    def test_bracket_quoted_part_may_contain_dot(self) -> None:
        table_id = TableId.parse("[inventory].[dbo].[order.items]")
        assert table_id == TableId("inventory", "dbo", "order.items")

    def test_double_quoted_part(self) -> None:
        assert TableId.parse('dbo."Order Lines"').table == "Order Lines"

    @pytest.mark.parametrize("text", ["", "a..b", "a.b.c.d", "[dbo.orders"])
    def test_invalid_identifiers(self, text: str) -> None:
        with pytest.raises(ValidationError):
            TableId.parse(text)


class TestTableIdValue:
    """Test TableId as a value type."""

    def test_str_omits_missing_parts(self) -> None:
        assert str(TableId("inventory", "dbo", "orders")) == "inventory.dbo.orders"
        assert str(TableId(None, "dbo", "orders")) == "dbo.orders"

    def test_str_brackets_parts_containing_dots(self) -> None:
        table_id = TableId("inventory", "dbo", "order.items")
        assert str(table_id) == "inventory.dbo.[order.items]"
        assert TableId.parse(table_id.identifier) == table_id

    def test_dotted_part_does_not_collide_with_other_table(self) -> None:
        dotted = TableId("inventory", "dbo.order", "items")
        plain = TableId("inventory", "dbo", "order.items")
        assert dotted.identifier != plain.identifier
        assert TableId.parse(dotted.identifier) == dotted

    def test_str_double_quotes_parts_containing_brackets(self) -> None:
        table_id = TableId(None, "dbo", "odd]name")
        assert str(table_id) == 'dbo."odd]name"'
        assert TableId.parse(str(table_id)) == table_id

    def test_hashable_and_equal(self) -> None:
        ids = {TableId("db", "dbo", "a"), TableId("db", "dbo", "a")}
        assert len(ids) == 1

    def test_frozen(self) -> None:
        table_id = TableId("db", "dbo", "a")
        with pytest.raises(AttributeError):
            table_id.table = "b"  # type: ignore[misc]

    def test_ordering(self) -> None:
        ids = [
            TableId("db", "dbo", "b"),
            TableId(None, "dbo", "z"),
            TableId("db", "dbo", "a"),
            TableId("db", "audit", "x"),
        ]
        assert sorted(ids) == [
            TableId(None, "dbo", "z"),
            TableId("db", "audit", "x"),
            TableId("db", "dbo", "a"),
            TableId("db", "dbo", "b"),
        ]

    def test_empty_table_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TableId("db", "dbo", "")

    def test_schema_qualified(self) -> None:
        assert TableId("db", "dbo", "orders").schema_qualified == "dbo.orders"
        assert TableId(None, None, "orders").schema_qualified == "orders"
