"""Unit tests for tabletrace.schema.registry module."""

import threading

import pytest

from tabletrace.relational.table import Column, Table
from tabletrace.relational.table_id import TableId
from tabletrace.schema.registry import SchemaRegistry

ORDERS = TableId("inventory", "dbo", "orders")


def _orders(column_count: int) -> Table:
    columns = tuple(
        Column(name=f"c{i}", type_name="int", position=i) for i in range(1, column_count + 1)
    )
    return Table(id=ORDERS, columns=columns)


class TestSchemaRegistryWrites:
    """Test put() and mark_dropped()."""

    def test_put_then_get(self) -> None:
        registry = SchemaRegistry()
        table = _orders(2)
        registry.put(table)

        assert registry.get(ORDERS) == table
        assert ORDERS in registry
        assert len(registry) == 1

    def test_put_replaces_whole_definition(self) -> None:
        registry = SchemaRegistry()
        registry.put(_orders(3))
        registry.put(_orders(1))

        table = registry.get(ORDERS)
        assert table is not None
        assert table.column_names == ("c1",)

    def test_each_write_bumps_version(self) -> None:
        registry = SchemaRegistry()
        first = registry.put(_orders(1))
        second = registry.put(_orders(1))

        assert (first.version, second.version) == (1, 2)
        assert registry.version == 2

    def test_mark_dropped_keeps_tombstone(self) -> None:
        registry = SchemaRegistry()
        table = _orders(2)
        registry.put(table)
        registry.mark_dropped(table)

        assert registry.get(ORDERS) is None
        assert registry.schema_for(ORDERS) is None
        entry = registry.entry(ORDERS)
        assert entry is not None
        assert entry.dropped
        assert entry.table == table
        assert ORDERS in registry
        assert ORDERS not in registry.table_ids()

    def test_put_revives_dropped_table(self) -> None:
        registry = SchemaRegistry()
        registry.mark_dropped(_orders(1))
        registry.put(_orders(2))

        assert registry.get(ORDERS) == _orders(2)

    def test_origin_is_kept_read_only(self) -> None:
        registry = SchemaRegistry()
        entry = registry.put(_orders(1), origin={"type": "create"})

        assert entry.origin["type"] == "create"
        with pytest.raises(TypeError):
            entry.origin["type"] = "alter"  # type: ignore[index]


class TestSchemaRegistryReads:
    """Test snapshots, history and capture-set views."""

    def test_unknown_table(self) -> None:
        registry = SchemaRegistry()
        assert registry.get(ORDERS) is None
        assert registry.entry(ORDERS) is None
        assert registry.schema_for(ORDERS) is None

    def test_snapshot_is_not_affected_by_later_writes(self) -> None:
        registry = SchemaRegistry()
        registry.put(_orders(1))
        snapshot = registry.snapshot()
        registry.put(_orders(2))

        assert snapshot[ORDERS].table == _orders(1)
        assert registry.snapshot()[ORDERS].table == _orders(2)

    def test_snapshot_is_read_only(self) -> None:
        registry = SchemaRegistry()
        with pytest.raises(TypeError):
            registry.snapshot()[ORDERS] = None  # type: ignore[index]

    def test_history_in_application_order(self) -> None:
        registry = SchemaRegistry()
        other = TableId("inventory", "dbo", "customers")
        registry.put(_orders(1))
        registry.put(Table(id=other))
        registry.put(_orders(2))

        assert [v.version for v in registry.history()] == [1, 2, 3]
        assert [v.version for v in registry.history(ORDERS)] == [1, 3]

    def test_capture_set_view(self) -> None:
        registry = SchemaRegistry(captured_tables=[ORDERS])

        assert registry.snapshot_captured_view() == frozenset({ORDERS})
        assert registry.is_captured(ORDERS)
        assert not registry.is_captured(TableId("inventory", "dbo", "customers"))

    def test_capture_set_not_changed_by_writes(self) -> None:
        registry = SchemaRegistry(captured_tables=[ORDERS])
        registry.put(Table(id=TableId("inventory", "dbo", "new_table")))

        assert registry.snapshot_captured_view() == frozenset({ORDERS})


class TestSchemaRegistryConcurrency:
    """Readers never observe partially written entries."""

    def test_concurrent_readers_see_complete_definitions(self) -> None:
        registry = SchemaRegistry()
        registry.put(_orders(1))
        valid_lengths = {1, 5}
        observed: list[int] = []
        stop = threading.Event()

        def read() -> None:
            while not stop.is_set():
                entry = registry.snapshot()[ORDERS]
                observed.append(len(entry.table.columns))

        readers = [threading.Thread(target=read) for _ in range(4)]
        for reader in readers:
            reader.start()
        for i in range(200):
            registry.put(_orders(5 if i % 2 else 1))
        stop.set()
        for reader in readers:
            reader.join()

        assert set(observed) <= valid_lengths
        assert registry.version == 201

    def test_concurrent_writers_get_unique_versions(self) -> None:
        registry = SchemaRegistry()
        versions: list[int] = []
        lock = threading.Lock()

        def write() -> None:
            for _ in range(50):
                entry = registry.put(_orders(1))
                with lock:
                    versions.append(entry.version)

        writers = [threading.Thread(target=write) for _ in range(4)]
        for writer in writers:
            writer.start()
        for writer in writers:
            writer.join()

        assert sorted(versions) == list(range(1, 201))
        assert len(registry.history()) == 200
