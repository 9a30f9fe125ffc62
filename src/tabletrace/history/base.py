"""Historized schema store protocol and records.

The historized store keeps the append-only log of applied schema changes.
The applier hands every applied change to it; at startup the log is
replayed to rebuild the registry.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, Field, JsonValue

from tabletrace.events.base import BaseEvent
from tabletrace.relational.changes import (
    SchemaChangeEvent,
    SchemaChangeEventType,
    TableChange,
    TableChanges,
    change_origin,
)
from tabletrace.relational.table import Table
from tabletrace.relational.table_id import TableId


class HistoryRecord(BaseModel, frozen=True):
    """One applied schema change as kept in the history log.

    Attributes:
        event_id: Identifier of the stored history event.
        table_id: Table the change applied to.
        change_type: Kind of change.
        from_snapshot: Whether the change came from the snapshot pass.
        database: Source database name.
        schema_name: Schema the table lives in.
        ddl: Statement text, if the source provided one.
        source: Origin metadata of the change.
        table: Definition of the table after the change.
        table_changes: Table-changes record, for snapshot creations only.
        detected_at: When the change was detected upstream.
        recorded_at: When the record was appended.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    table_id: TableId
    change_type: SchemaChangeEventType
    from_snapshot: bool = False
    database: str = ""
    schema_name: str | None = None
    ddl: str | None = None
    source: dict[str, JsonValue] = Field(default_factory=dict)
    table: Table
    table_changes: tuple[TableChange, ...] | None = None
    detected_at: datetime
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_change(
        cls, event: SchemaChangeEvent, table_changes: TableChanges | None
    ) -> HistoryRecord:
        """Build a record from an applied change."""
        table = event.single_table()
        return cls(
            table_id=table.id,
            change_type=event.type,
            from_snapshot=event.from_snapshot,
            database=event.database,
            schema_name=event.schema_name,
            ddl=event.ddl,
            source=dict(event.source),
            table=table,
            table_changes=tuple(table_changes) if table_changes is not None else None,
            detected_at=event.timestamp,
        )

    @classmethod
    def from_event(cls, event: BaseEvent) -> HistoryRecord:
        """Rebuild a record from a stored schema history event."""
        data = event.data
        table = Table.from_dict(data["table"])
        changes = data.get("table_changes")
        detected_at = data.get("detected_at")
        return cls(
            event_id=event.id,
            table_id=table.id,
            change_type=SchemaChangeEventType(data["change_type"]),
            from_snapshot=data.get("from_snapshot", False),
            database=data.get("database", ""),
            schema_name=data.get("schema_name"),
            ddl=data.get("ddl"),
            source=data.get("source") or {},
            table=table,
            table_changes=(
                tuple(TableChanges.from_list(changes)) if changes is not None else None
            ),
            detected_at=(
                datetime.fromisoformat(detected_at) if detected_at else event.timestamp
            ),
            recorded_at=event.timestamp,
        )

    @property
    def changes(self) -> TableChanges | None:
        """The table-changes record as a TableChanges, if there is one."""
        if self.table_changes is None:
            return None
        return TableChanges(list(self.table_changes))

    @property
    def origin(self) -> dict[str, Any]:
        """Registry origin metadata, as it was when the change was applied live."""
        return change_origin(
            self.change_type,
            from_snapshot=self.from_snapshot,
            detected_at=self.detected_at,
            source=self.source,
        )


class SchemaHistory(Protocol):
    """Append-only durable log of applied schema changes."""

    async def record(
        self, event: SchemaChangeEvent, table_changes: TableChanges | None
    ) -> None:
        """Append an applied change.

        Raises:
            PersistenceError: If the change could not be made durable.
        """
        ...

    async def replay(self) -> list[HistoryRecord]:
        """All records in append order."""
        ...


class InMemorySchemaHistory:
    """SchemaHistory kept in a list. Nothing survives the process."""

    def __init__(self) -> None:
        self._records: list[HistoryRecord] = []

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        return tuple(self._records)

    async def record(
        self, event: SchemaChangeEvent, table_changes: TableChanges | None
    ) -> None:
        self._records.append(HistoryRecord.from_change(event, table_changes))

    async def replay(self) -> list[HistoryRecord]:
        return list(self._records)
