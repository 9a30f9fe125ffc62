"""Schema change events and table-changes records.

A SchemaChangeEvent announces a structural change to one table and carries
the table's complete post-change definition. TableChanges is the history
record written for snapshot-originated table creations.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, JsonValue, field_validator
from pydantic_core import to_jsonable_python

from tabletrace.core.errors import SchemaChangeContractError
from tabletrace.relational.table import Table
from tabletrace.relational.table_id import TableId


class SchemaChangeEventType(StrEnum):
    """Kind of structural change announced by an event."""

    CREATE = "create"
    ALTER = "alter"
    DROP = "drop"
    TRUNCATE = "truncate"
    DATABASE = "database"


def change_origin(
    change_type: SchemaChangeEventType,
    *,
    from_snapshot: bool,
    detected_at: datetime,
    source: dict[str, JsonValue],
) -> dict[str, Any]:
    """Origin metadata kept alongside each registry version, live or restored."""
    return {
        "type": change_type.value,
        "from_snapshot": from_snapshot,
        "timestamp": detected_at.isoformat(),
        "source": dict(source),
    }


class SchemaChangeEvent(BaseModel, frozen=True):
    """Notification of a structural change to a table.

    Attributes:
        database: Source database name.
        schema_name: Schema the changed table lives in.
        ddl: Statement text as captured upstream. Opaque, only recorded.
        tables: Resolved table definitions. Exactly one is expected.
        type: Kind of change.
        from_snapshot: True if emitted by the initial snapshot pass.
        source: Origin metadata of the change (log positions, timestamps).
            Values are stored as JSON: datetimes become ISO strings and
            bytes become hex strings.
        timestamp: When the change was detected (UTC).
    """

    database: str
    schema_name: str | None = None
    ddl: str | None = None
    tables: tuple[Table, ...] = ()
    type: SchemaChangeEventType
    from_snapshot: bool = False
    source: dict[str, JsonValue] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("source", mode="before")
    @classmethod
    def jsonable_source(cls, v: Any) -> Any:
        """Render source metadata as JSON values; unknown types are rejected."""
        return to_jsonable_python(v, bytes_mode="hex")

    @classmethod
    def for_table(
        cls,
        table: Table,
        change_type: SchemaChangeEventType,
        *,
        from_snapshot: bool = False,
        ddl: str | None = None,
        source: dict[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> SchemaChangeEvent:
        """Build an event for a single table, taking database and schema from its id."""
        return cls(
            database=table.id.catalog or "",
            schema_name=table.id.schema,
            ddl=ddl,
            tables=(table,),
            type=change_type,
            from_snapshot=from_snapshot,
            source=source or {},
            timestamp=timestamp or datetime.now(UTC),
        )

    def single_table(self) -> Table:
        """Return the one table this event carries.

        Raises:
            SchemaChangeContractError: If the event carries zero or several tables.
        """
        if len(self.tables) != 1:
            raise SchemaChangeContractError(
                f"Schema change event must carry exactly one table, got {len(self.tables)}",
                table_count=len(self.tables),
                details={
                    "type": self.type.value,
                    "database": self.database,
                    "tables": [str(table.id) for table in self.tables],
                },
            )
        return self.tables[0]

    @property
    def origin(self) -> dict[str, Any]:
        """Metadata kept alongside each registry version."""
        return change_origin(
            self.type,
            from_snapshot=self.from_snapshot,
            detected_at=self.timestamp,
            source=self.source,
        )


class TableChangeType(StrEnum):
    """Kind of table change kept in a history record."""

    CREATE = "create"
    ALTER = "alter"
    DROP = "drop"


class TableChange(BaseModel, frozen=True):
    """One table definition captured for history replay."""

    type: TableChangeType
    id: TableId
    table: Table

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "id": str(self.id), "table": self.table.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableChange:
        table = Table.from_dict(data["table"])
        return cls(type=TableChangeType(data["type"]), id=table.id, table=table)


class TableChanges:
    """Ordered list of table changes that make up one history record.

    Usage:
        changes = TableChanges().create(table)
        payload = changes.to_list()
    """

    def __init__(self, changes: list[TableChange] | None = None) -> None:
        self._changes: list[TableChange] = list(changes or [])

    def _add(self, change_type: TableChangeType, table: Table) -> TableChanges:
        self._changes.append(TableChange(type=change_type, id=table.id, table=table))
        return self

    def create(self, table: Table) -> TableChanges:
        return self._add(TableChangeType.CREATE, table)

    def alter(self, table: Table) -> TableChanges:
        return self._add(TableChangeType.ALTER, table)

    def drop(self, table: Table) -> TableChanges:
        return self._add(TableChangeType.DROP, table)

    def __iter__(self) -> Iterator[TableChange]:
        return iter(self._changes)

    def __len__(self) -> int:
        return len(self._changes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TableChanges):
            return NotImplemented
        return self._changes == other._changes

    def __repr__(self) -> str:
        return f"TableChanges({self._changes!r})"

    def to_list(self) -> list[dict[str, Any]]:
        """JSON-compatible representation for durable storage."""
        return [change.to_dict() for change in self._changes]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> TableChanges:
        return cls([TableChange.from_dict(item) for item in data])
