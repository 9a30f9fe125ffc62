"""Unit tests for tabletrace.schema.database_schema module."""

import pytest

from tabletrace.config.models import ConnectorConfig, FilterConfig
from tabletrace.core.errors import CaptureResolutionError, ConfigError
from tabletrace.history.base import InMemorySchemaHistory
from tabletrace.relational.changes import SchemaChangeEvent, SchemaChangeEventType
from tabletrace.relational.filters import PredicateTableFilter
from tabletrace.relational.table_id import TableId
from tabletrace.schema.database_schema import DatabaseSchema, default_schema_builder

ORDERS = TableId("inventory", "dbo", "orders")
CUSTOMERS = TableId("inventory", "dbo", "customers")
CHANGE_TABLE = TableId("inventory", "cdc", "dbo_orders_CT")


class StaticLister:
    def __init__(self, tables: set[TableId]) -> None:
        self.tables = tables

    def list_tables(self, database: str) -> set[TableId]:
        return set(self.tables)


class BrokenLister:
    def list_tables(self, database: str) -> set[TableId]:
        raise ConnectionError("login failed for user 'cdc'")


def _config(**filters: object) -> ConnectorConfig:
    return ConnectorConfig(
        database_name="inventory",
        server_name="server1",
        filters=FilterConfig(**filters),
    )


class TestDatabaseSchemaCreate:
    """Test construction and capture set resolution."""

    def test_capture_set_from_config_filters(self) -> None:
        lister = StaticLister({ORDERS, CUSTOMERS, CHANGE_TABLE})
        schema = DatabaseSchema.create(
            _config(table_include_list=[r"dbo\.orders"]), lister, InMemorySchemaHistory()
        )

        assert schema.captured_tables == frozenset({ORDERS})
        assert schema.is_captured(ORDERS)
        assert not schema.is_captured(CUSTOMERS)

    def test_system_tables_never_captured_by_default(self) -> None:
        lister = StaticLister({ORDERS, CHANGE_TABLE})
        schema = DatabaseSchema.create(_config(), lister, InMemorySchemaHistory())

        assert schema.captured_tables == frozenset({ORDERS})

    def test_explicit_filter_overrides_config(self) -> None:
        lister = StaticLister({ORDERS, CUSTOMERS})
        schema = DatabaseSchema.create(
            _config(),
            lister,
            InMemorySchemaHistory(),
            table_filter=PredicateTableFilter(lambda table_id: table_id == CUSTOMERS),
        )

        assert schema.captured_tables == frozenset({CUSTOMERS})

    def test_listing_failure_aborts_construction(self) -> None:
        with pytest.raises(CaptureResolutionError) as exc_info:
            DatabaseSchema.create(_config(), BrokenLister(), InMemorySchemaHistory())
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_invalid_filter_pattern(self) -> None:
        with pytest.raises(ConfigError):
            DatabaseSchema.create(
                _config(table_exclude_list=["dbo.[orders"]),
                StaticLister({ORDERS}),
                InMemorySchemaHistory(),
            )

    def test_registry_starts_empty(self) -> None:
        schema = DatabaseSchema.create(_config(), StaticLister({ORDERS}), InMemorySchemaHistory())
        assert len(schema.registry) == 0
        assert schema.table_for(ORDERS) is None


class TestDatabaseSchemaChanges:
    """Test applying changes and recovering from history."""

    async def test_apply_schema_change(self, make_table) -> None:
        schema = DatabaseSchema.create(_config(), StaticLister({ORDERS}), InMemorySchemaHistory())
        table = make_table()

        result = await schema.apply_schema_change(
            SchemaChangeEvent.for_table(table, SchemaChangeEventType.CREATE, from_snapshot=True)
        )

        assert result.is_ok
        assert schema.table_for(ORDERS) == table
        derived = schema.schema_for(ORDERS)
        assert derived is not None
        assert derived.name == "server1.dbo.orders"

    async def test_recover_rebuilds_registry(self, make_table) -> None:
        history = InMemorySchemaHistory()
        first = DatabaseSchema.create(_config(), StaticLister({ORDERS}), history)
        table = make_table()
        altered = make_table(extra_columns=(("note", "ntext"),))
        gone = make_table("customers")
        await first.apply_schema_change(
            SchemaChangeEvent.for_table(table, SchemaChangeEventType.CREATE, from_snapshot=True)
        )
        await first.apply_schema_change(
            SchemaChangeEvent.for_table(altered, SchemaChangeEventType.ALTER)
        )
        await first.apply_schema_change(
            SchemaChangeEvent.for_table(gone, SchemaChangeEventType.CREATE)
        )
        await first.apply_schema_change(
            SchemaChangeEvent.for_table(gone, SchemaChangeEventType.DROP)
        )

        second = DatabaseSchema.create(_config(), StaticLister({ORDERS}), history)
        replayed = await second.recover()

        assert replayed == 4
        assert second.table_for(ORDERS) == altered
        assert second.table_for(gone.id) is None
        assert second.registry.table_ids() == frozenset({ORDERS})
        assert len(history.records) == 4


class TestCaptureSetAndRegistryIndependence:
    """Capture-set membership and registry membership are independent."""

    async def test_snapshot_create_of_uncaptured_table(self, make_table) -> None:
        table_a, table_b, table_c = (make_table(name) for name in ("a", "b", "c"))
        lister = StaticLister({table_a.id, table_b.id, table_c.id})
        schema = DatabaseSchema.create(
            _config(),
            lister,
            InMemorySchemaHistory(),
            table_filter=PredicateTableFilter(lambda table_id: table_id.table in {"a", "c"}),
        )
        assert schema.captured_tables == frozenset({table_a.id, table_c.id})

        result = await schema.apply_schema_change(
            SchemaChangeEvent.for_table(table_b, SchemaChangeEventType.CREATE, from_snapshot=True)
        )

        assert result.is_ok
        assert result.value is not None
        assert [change.id for change in result.value] == [table_b.id]
        assert schema.table_for(table_b.id) == table_b
        assert not schema.is_captured(table_b.id)


class TestDefaultSchemaBuilder:
    def test_uses_config_server_name(self, make_table) -> None:
        builder = default_schema_builder(_config())
        assert builder.build(make_table()).name == "server1.dbo.orders"
