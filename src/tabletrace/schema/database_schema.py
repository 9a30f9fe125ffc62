"""Logical schema of one captured database.

DatabaseSchema wires the capture set, the schema registry, the schema
builder and the historized store together for a single connector
instance. The capture set is resolved when the instance is created; a
failure to list tables aborts creation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tabletrace.capture.resolver import CaptureSetResolver, TableLister
from tabletrace.core.errors import PersistenceError
from tabletrace.core.types import Result
from tabletrace.history.base import SchemaHistory
from tabletrace.relational.changes import SchemaChangeEvent, TableChanges
from tabletrace.relational.filters import RegexTableFilter, TableFilter
from tabletrace.relational.table import Table
from tabletrace.relational.table_id import TableId
from tabletrace.schema.applier import SchemaChangeApplier
from tabletrace.schema.builder import DerivedSchema, SchemaBuilder, TableSchemaBuilder
from tabletrace.schema.converters import ValueConverters
from tabletrace.schema.naming import SchemaNameAdjuster
from tabletrace.schema.registry import SchemaRegistry

if TYPE_CHECKING:
    from tabletrace.config.models import ConnectorConfig

log = structlog.get_logger()


def default_schema_builder(config: ConnectorConfig) -> TableSchemaBuilder:
    """Schema builder honouring the configured decimal handling mode."""
    return TableSchemaBuilder(
        ValueConverters(config.decimal_handling_mode),
        SchemaNameAdjuster(),
        config.server_name,
    )


class DatabaseSchema:
    """Captured tables and versioned table definitions of one database.

    Usage:
        schema = DatabaseSchema.create(config, lister, history)
        await schema.recover()
        result = await schema.apply_schema_change(event)
        schema.table_for(table_id)
    """

    def __init__(
        self,
        database_name: str,
        captured_tables: frozenset[TableId],
        schema_builder: SchemaBuilder,
        history: SchemaHistory,
    ) -> None:
        self.database_name = database_name
        self._history = history
        self._registry = SchemaRegistry(captured_tables)
        self._applier = SchemaChangeApplier(self._registry, schema_builder, history)

    @classmethod
    def create(
        cls,
        config: ConnectorConfig,
        lister: TableLister,
        history: SchemaHistory,
        *,
        table_filter: TableFilter | None = None,
        schema_builder: SchemaBuilder | None = None,
    ) -> DatabaseSchema:
        """Resolve the capture set and build the schema.

        Args:
            config: Connector configuration.
            lister: Lists the tables of the source database.
            history: Historized store for applied changes.
            table_filter: Overrides the filter built from config.filters.
            schema_builder: Overrides the builder built from config.

        Raises:
            CaptureResolutionError: If the table listing fails.
            ConfigError: If a filter pattern is invalid.
        """
        if table_filter is None:
            table_filter = RegexTableFilter.from_config(config.filters)
        captured = CaptureSetResolver(lister, table_filter).determine(config.database_name)
        return cls(
            config.database_name,
            captured,
            schema_builder or default_schema_builder(config),
            history,
        )

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def captured_tables(self) -> frozenset[TableId]:
        return self._registry.snapshot_captured_view()

    def is_captured(self, table_id: TableId) -> bool:
        return self._registry.is_captured(table_id)

    def table_for(self, table_id: TableId) -> Table | None:
        return self._registry.get(table_id)

    def schema_for(self, table_id: TableId) -> DerivedSchema | None:
        return self._registry.schema_for(table_id)

    async def apply_schema_change(
        self, event: SchemaChangeEvent
    ) -> Result[TableChanges | None, PersistenceError]:
        """Apply one schema change. See SchemaChangeApplier.apply()."""
        return await self._applier.apply(event)

    async def recover(self) -> int:
        """Rebuild the registry from the history log.

        Returns:
            Number of history records replayed.

        Raises:
            PersistenceError: If the history cannot be read.
        """
        records = await self._history.replay()
        for record in records:
            self._applier.restore(record)

        log.info(
            "schema.registry.recovered",
            database=self.database_name,
            records=len(records),
            tables=len(self._registry.table_ids()),
        )
        return len(records)
