"""Schema history events.

Event Types:
- schema.table.create_recorded
- schema.table.alter_recorded
- schema.table.drop_recorded
- schema.table.truncate_recorded
- schema.table.database_recorded

Aggregate: "table", identified by the dotted table identifier.
"""

from __future__ import annotations

from typing import Any

from tabletrace.events.base import BaseEvent
from tabletrace.relational.changes import (
    SchemaChangeEvent,
    SchemaChangeEventType,
    TableChanges,
)

TABLE_AGGREGATE = "table"


def event_type_for(change_type: SchemaChangeEventType) -> str:
    """Event type under which a change of the given kind is recorded."""
    return f"schema.table.{change_type.value}_recorded"


def create_schema_change_recorded(
    event: SchemaChangeEvent,
    table_changes: TableChanges | None,
) -> BaseEvent:
    """Build the persisted form of an applied schema change.

    Args:
        event: The applied change. Must carry exactly one table.
        table_changes: Table-changes record, for snapshot creations only.

    Returns:
        Event ready to append to the EventStore.
    """
    table = event.single_table()
    data: dict[str, Any] = {
        "change_type": event.type.value,
        "from_snapshot": event.from_snapshot,
        "database": event.database,
        "schema_name": event.schema_name,
        "ddl": event.ddl,
        "source": event.source,
        "detected_at": event.timestamp.isoformat(),
        "table": table.to_dict(),
        "table_changes": table_changes.to_list() if table_changes is not None else None,
    }
    return BaseEvent(
        type=event_type_for(event.type),
        aggregate_type=TABLE_AGGREGATE,
        aggregate_id=table.id.identifier,
        data=data,
    )
