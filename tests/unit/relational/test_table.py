"""Unit tests for tabletrace.relational.table module."""

from pydantic import ValidationError as PydanticValidationError
import pytest

from tabletrace.relational.table import Column, Table
from tabletrace.relational.table_id import TableId


def _column(name: str, position: int, type_name: str = "int") -> Column:
    return Column(name=name, type_name=type_name, position=position)


class TestTable:
    """Test Table validation and helpers."""

    def test_columns_sorted_by_position(self) -> None:
        table = Table(
            id=TableId("db", "dbo", "t"),
            columns=(_column("b", 2), _column("a", 1)),
        )
        assert table.column_names == ("a", "b")

    def test_id_accepts_dotted_string(self) -> None:
        table = Table(id="db.dbo.t", columns=(_column("a", 1),))  # type: ignore[arg-type]
        assert table.id == TableId("db", "dbo", "t")

    def test_duplicate_column_names_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="Duplicate column"):
            Table(id=TableId("db", "dbo", "t"), columns=(_column("a", 1), _column("A", 2)))

    def test_primary_key_must_name_a_column(self) -> None:
        with pytest.raises(PydanticValidationError, match="Primary key column"):
            Table(
                id=TableId("db", "dbo", "t"),
                columns=(_column("a", 1),),
                primary_key_columns=("missing",),
            )

    def test_primary_key_in_key_order(self) -> None:
        table = Table(
            id=TableId("db", "dbo", "t"),
            columns=(_column("a", 1), _column("b", 2)),
            primary_key_columns=("b", "a"),
        )
        assert [column.name for column in table.primary_key()] == ["b", "a"]

    def test_column_named_ignores_case(self) -> None:
        table = Table(id=TableId("db", "dbo", "t"), columns=(_column("OrderId", 1),))
        column = table.column_named("orderid")
        assert column is not None
        assert column.name == "OrderId"
        assert table.column_named("missing") is None

    def test_frozen(self) -> None:
        table = Table(id=TableId("db", "dbo", "t"))
        with pytest.raises(PydanticValidationError):
            table.comment = "changed"  # type: ignore[misc]

    def test_dict_round_trip(self, make_table) -> None:
        table = make_table()
        assert Table.from_dict(table.to_dict()) == table
