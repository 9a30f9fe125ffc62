"""Application of schema change events to the registry.

Each event carries the complete definition of one table after the change.
Applying it derives the published schema, replaces the registry entry and
hands the change to the historized store. The registry is updated before
the durable append and is not rolled back if the append fails: the
returned Result reports the failure, and closing the gap is up to the
store's retry and recovery policy.
"""

from __future__ import annotations

import structlog

from tabletrace.core.errors import PersistenceError
from tabletrace.core.types import Result
from tabletrace.history.base import HistoryRecord, SchemaHistory
from tabletrace.relational.changes import SchemaChangeEvent, SchemaChangeEventType, TableChanges
from tabletrace.schema.builder import SchemaBuilder
from tabletrace.schema.registry import SchemaRegistry

log = structlog.get_logger()


class SchemaChangeApplier:
    """Applies schema change events, one at a time, to a SchemaRegistry.

    The applier is the only writer of the registry during streaming. Calls
    to apply() are expected to complete before the next event is applied.

    Usage:
        applier = SchemaChangeApplier(registry, builder, history)
        result = await applier.apply(event)
        if result.is_err:
            log.error("connector.history.unavailable", error=str(result.error))
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        schema_builder: SchemaBuilder,
        history: SchemaHistory,
    ) -> None:
        self._registry = registry
        self._builder = schema_builder
        self._history = history

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    async def apply(
        self, event: SchemaChangeEvent
    ) -> Result[TableChanges | None, PersistenceError]:
        """Apply one schema change event.

        The registry entry is always overwritten, even when the definition
        is unchanged or the table was never seen before.

        Args:
            event: Change carrying exactly one resolved table definition.

        Returns:
            Ok with the table-changes record (None unless the event is a
            snapshot CREATE), or Err if the history append failed.

        Raises:
            SchemaChangeContractError: If the event does not carry exactly
                one table. The registry is left untouched.
        """
        table = event.single_table()
        table_id = str(table.id)
        log.debug(
            "schema.change.received",
            table_id=table_id,
            change_type=event.type.value,
            from_snapshot=event.from_snapshot,
        )

        if event.type is SchemaChangeEventType.DROP:
            entry = self._registry.mark_dropped(table, origin=event.origin)
        else:
            derived_schema = self._builder.build(table)
            entry = self._registry.put(table, derived_schema, origin=event.origin)

        table_changes: TableChanges | None = None
        if event.type is SchemaChangeEventType.CREATE and event.from_snapshot:
            table_changes = TableChanges().create(table)

        log.info(
            "schema.change.applied",
            table_id=table_id,
            change_type=event.type.value,
            from_snapshot=event.from_snapshot,
            registry_version=entry.version,
            captured=self._registry.is_captured(table.id),
        )

        try:
            await self._history.record(event, table_changes)
        except PersistenceError as e:
            log.error(
                "schema.history.record_failed",
                table_id=table_id,
                change_type=event.type.value,
                registry_version=entry.version,
                error=str(e),
            )
            return Result.err(e)

        return Result.ok(table_changes)

    def restore(self, record: HistoryRecord) -> None:
        """Re-apply a recorded change to the registry without recording it again.

        Used to rebuild the registry from the history log before streaming
        starts.
        """
        if record.change_type is SchemaChangeEventType.DROP:
            self._registry.mark_dropped(record.table, origin=record.origin)
        else:
            self._registry.put(
                record.table, self._builder.build(record.table), origin=record.origin
            )
