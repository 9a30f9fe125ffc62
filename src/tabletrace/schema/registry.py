"""In-memory, versioned registry of table definitions.

The registry maps each TableId to the definition most recently applied for
it, together with the derived schema published for that definition. State
is held in an immutable mapping that is replaced as a whole on every write:
a reader always sees either the previous or the new entry for a table,
never a partially updated one.

Writes go through put() and mark_dropped() and are only issued by the
schema change applier (or by history recovery before the connector starts
streaming). Reads need no locking.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import threading
from types import MappingProxyType
from typing import Any

from tabletrace.relational.table import Table
from tabletrace.relational.table_id import TableId
from tabletrace.schema.builder import DerivedSchema


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """Current knowledge about one table.

    Attributes:
        table: Last applied definition. Kept after a drop.
        derived_schema: Published schema, None once the table is dropped.
        version: Registry version that wrote this entry.
        dropped: Whether the last applied change dropped the table.
        origin: Metadata of the change that wrote this entry.
    """

    table: Table
    derived_schema: DerivedSchema | None
    version: int
    dropped: bool = False
    origin: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SchemaVersion:
    """One append-only history entry of the registry."""

    version: int
    table_id: TableId
    table: Table
    dropped: bool
    origin: Mapping[str, Any]


class SchemaRegistry:
    """Versioned TableId -> Table registry with snapshot-swap updates.

    Usage:
        registry = SchemaRegistry(captured_tables={orders_id})
        registry.put(table, derived_schema, origin=event.origin)
        registry.get(orders_id)  # the table just put
    """

    def __init__(self, captured_tables: Iterable[TableId] = ()) -> None:
        self._captured_tables = frozenset(captured_tables)
        self._entries: Mapping[TableId, RegistryEntry] = MappingProxyType({})
        self._history: list[SchemaVersion] = []
        self._version = 0
        self._write_lock = threading.Lock()

    def get(self, table_id: TableId) -> Table | None:
        """Current definition of a table, or None if unknown or dropped."""
        entry = self._entries.get(table_id)
        if entry is None or entry.dropped:
            return None
        return entry.table

    def entry(self, table_id: TableId) -> RegistryEntry | None:
        """Full registry entry, including tombstones of dropped tables."""
        return self._entries.get(table_id)

    def schema_for(self, table_id: TableId) -> DerivedSchema | None:
        """Published schema of a table, or None if unknown or dropped."""
        entry = self._entries.get(table_id)
        if entry is None:
            return None
        return entry.derived_schema

    def snapshot(self) -> Mapping[TableId, RegistryEntry]:
        """Read-only view of every entry as of one registry version."""
        return self._entries

    def table_ids(self) -> frozenset[TableId]:
        """Tables with a live (not dropped) definition."""
        return frozenset(tid for tid, entry in self._entries.items() if not entry.dropped)

    def snapshot_captured_view(self) -> frozenset[TableId]:
        """The capture set resolved when the connector was constructed."""
        return self._captured_tables

    def is_captured(self, table_id: TableId) -> bool:
        return table_id in self._captured_tables

    @property
    def version(self) -> int:
        """Number of writes applied so far."""
        return self._version

    def history(self, table_id: TableId | None = None) -> tuple[SchemaVersion, ...]:
        """Applied versions in application order, optionally for one table."""
        versions = tuple(self._history)
        if table_id is None:
            return versions
        return tuple(version for version in versions if version.table_id == table_id)

    def _write(self, entry: RegistryEntry) -> RegistryEntry:
        table_id = entry.table.id
        entries = dict(self._entries)
        entries[table_id] = entry
        self._entries = MappingProxyType(entries)
        self._history.append(
            SchemaVersion(
                version=entry.version,
                table_id=table_id,
                table=entry.table,
                dropped=entry.dropped,
                origin=entry.origin,
            )
        )
        return entry

    def put(
        self,
        table: Table,
        derived_schema: DerivedSchema | None = None,
        *,
        origin: Mapping[str, Any] | None = None,
    ) -> RegistryEntry:
        """Replace the entry of a table with a new definition.

        The previous entry, if any, is discarded as a whole; nothing is
        merged from it. Putting a table that was dropped revives it.

        Returns:
            The entry now visible to readers.
        """
        with self._write_lock:
            self._version += 1
            return self._write(
                RegistryEntry(
                    table=table,
                    derived_schema=derived_schema,
                    version=self._version,
                    origin=MappingProxyType(dict(origin or {})),
                )
            )

    def mark_dropped(
        self,
        table: Table,
        *,
        origin: Mapping[str, Any] | None = None,
    ) -> RegistryEntry:
        """Replace the entry of a table with a tombstone.

        The last definition is kept so older change records can still be
        interpreted; get() and schema_for() stop returning it.
        """
        with self._write_lock:
            self._version += 1
            return self._write(
                RegistryEntry(
                    table=table,
                    derived_schema=None,
                    version=self._version,
                    dropped=True,
                    origin=MappingProxyType(dict(origin or {})),
                )
            )

    def __contains__(self, table_id: object) -> bool:
        return table_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
