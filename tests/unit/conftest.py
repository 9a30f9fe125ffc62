"""Shared fixtures for tabletrace unit tests."""

from collections.abc import Callable

import pytest

from tabletrace.relational.table import Column, Table
from tabletrace.relational.table_id import TableId

TableFactory = Callable[..., Table]


@pytest.fixture
def make_table() -> TableFactory:
    """Factory for small tables with an int primary key."""

    def _make(
        name: str = "orders",
        *,
        schema: str = "dbo",
        catalog: str = "inventory",
        extra_columns: tuple[tuple[str, str], ...] = (("description", "nvarchar"),),
    ) -> Table:
        columns = [Column(name="id", type_name="int", position=1, optional=False)]
        for offset, (column_name, type_name) in enumerate(extra_columns, start=2):
            columns.append(Column(name=column_name, type_name=type_name, position=offset))
        return Table(
            id=TableId(catalog, schema, name),
            columns=tuple(columns),
            primary_key_columns=("id",),
        )

    return _make
