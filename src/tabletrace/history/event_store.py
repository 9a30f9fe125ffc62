"""SchemaHistory backed by the SQLAlchemy EventStore.

Appends are retried with stamina on PersistenceError. Once the attempts are
used up the error propagates to the applier, which reports it to the
caller without undoing the in-memory registry update.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import stamina
import structlog

from tabletrace.core.errors import PersistenceError
from tabletrace.events.schema import TABLE_AGGREGATE, create_schema_change_recorded
from tabletrace.history.base import HistoryRecord
from tabletrace.persistence.event_store import EventStore
from tabletrace.relational.changes import SchemaChangeEvent, TableChanges
from tabletrace.relational.table_id import TableId

if TYPE_CHECKING:
    from tabletrace.config.models import HistoryConfig

log = structlog.get_logger()

RETRY_WAIT_INITIAL = 0.1
RETRY_WAIT_MAX = 2.0


class EventStoreSchemaHistory:
    """Durable schema history on top of an EventStore.

    Usage:
        history = EventStoreSchemaHistory(EventStore("sqlite+aiosqlite:///history.db"))
        await history.initialize()
        await history.record(event, table_changes)
        records = await history.replay()
        await history.close()
    """

    def __init__(
        self,
        store: EventStore,
        *,
        retry_attempts: int = 3,
        retry_timeout: float = 10.0,
    ) -> None:
        self._store = store
        self._retry_attempts = retry_attempts
        self._retry_timeout = retry_timeout

    @classmethod
    def from_config(cls, config: HistoryConfig, config_dir: Path) -> EventStoreSchemaHistory:
        """Build the history from configuration.

        Args:
            config: History section of the connector configuration.
            config_dir: Directory relative paths are resolved against.
        """
        db_path = Path(config.database_path).expanduser()
        if not db_path.is_absolute():
            db_path = config_dir / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(
            EventStore(f"sqlite+aiosqlite:///{db_path}"),
            retry_attempts=config.retry_attempts,
            retry_timeout=config.retry_timeout,
        )

    async def initialize(self) -> None:
        await self._store.initialize()

    async def close(self) -> None:
        await self._store.close()

    async def record(
        self, event: SchemaChangeEvent, table_changes: TableChanges | None
    ) -> None:
        """Append an applied change, retrying transient storage failures.

        Raises:
            PersistenceError: If every attempt failed.
        """
        history_event = create_schema_change_recorded(event, table_changes)

        @stamina.retry(
            on=PersistenceError,
            attempts=self._retry_attempts,
            timeout=self._retry_timeout,
            wait_initial=RETRY_WAIT_INITIAL,
            wait_max=RETRY_WAIT_MAX,
        )
        async def _append() -> None:
            await self._store.append(history_event)

        try:
            await _append()
        except PersistenceError as e:
            log.warning(
                "schema.history.append_failed.retries_exhausted",
                table_id=history_event.aggregate_id,
                event_type=history_event.type,
                attempts=self._retry_attempts,
                error=str(e),
            )
            raise

        log.debug(
            "schema.history.appended",
            table_id=history_event.aggregate_id,
            event_type=history_event.type,
        )

    async def replay(self) -> list[HistoryRecord]:
        events = await self._store.replay_all(TABLE_AGGREGATE)
        return [HistoryRecord.from_event(event) for event in events]

    async def replay_table(self, table_id: TableId) -> list[HistoryRecord]:
        """Records of one table, in append order."""
        events = await self._store.replay(TABLE_AGGREGATE, table_id.identifier)
        return [HistoryRecord.from_event(event) for event in events]
