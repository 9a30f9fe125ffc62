"""EventStore for the schema history log.

Provides async methods for appending and replaying events using SQLAlchemy
Core with an aiosqlite backend.
"""

from pathlib import Path

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from tabletrace.core.errors import PersistenceError
from tabletrace.events.base import BaseEvent
from tabletrace.persistence.schema import metadata, schema_history_table


class EventStore:
    """Append-only event store.

    All operations are transactional.

    Usage:
        store = EventStore("sqlite+aiosqlite:///schema_history.db")
        await store.initialize()

        await store.append(event)
        events = await store.replay("table", "inventory.dbo.orders")

        await store.close()
    """

    def __init__(self, database_url: str | None = None) -> None:
        """Initialize EventStore with a database URL.

        Args:
            database_url: SQLAlchemy async database URL. Defaults to
                ~/.tabletrace/data/schema_history.db
        """
        if database_url is None:
            db_path = Path.home() / ".tabletrace" / "data" / "schema_history.db"
            db_path.parent.mkdir(parents=True, exist_ok=True)
            database_url = f"sqlite+aiosqlite:///{db_path}"
        self._database_url = database_url
        self._engine: AsyncEngine | None = None

    @property
    def database_url(self) -> str:
        return self._database_url

    def _require_engine(self, operation: str) -> AsyncEngine:
        if self._engine is None:
            raise PersistenceError(
                "EventStore not initialized. Call initialize() first.",
                operation=operation,
            )
        return self._engine

    async def initialize(self) -> None:
        """Connect and create tables if needed. Safe to call repeatedly."""
        if self._engine is None:
            self._engine = create_async_engine(self._database_url, echo=False)

        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def append(self, event: BaseEvent) -> None:
        """Append an event in its own transaction.

        Raises:
            PersistenceError: If the append fails. Nothing is stored then.
        """
        engine = self._require_engine("append")

        try:
            async with engine.begin() as conn:
                await conn.execute(schema_history_table.insert().values(**event.to_db_dict()))
        except Exception as e:
            raise PersistenceError(
                f"Failed to append event: {e}",
                operation="insert",
                table="schema_history",
                details={"event_id": event.id, "event_type": event.type},
            ) from e

    async def replay(self, aggregate_type: str, aggregate_id: str) -> list[BaseEvent]:
        """Replay all events of one aggregate, in append order.

        Raises:
            PersistenceError: If the query fails.
        """
        engine = self._require_engine("replay")

        try:
            async with engine.begin() as conn:
                result = await conn.execute(
                    select(schema_history_table)
                    .where(schema_history_table.c.aggregate_type == aggregate_type)
                    .where(schema_history_table.c.aggregate_id == aggregate_id)
                    .order_by(schema_history_table.c.sequence)
                )
                rows = result.mappings().all()
                return [BaseEvent.from_db_row(dict(row)) for row in rows]
        except Exception as e:
            raise PersistenceError(
                f"Failed to replay events: {e}",
                operation="select",
                table="schema_history",
                details={"aggregate_type": aggregate_type, "aggregate_id": aggregate_id},
            ) from e

    async def replay_all(self, aggregate_type: str | None = None) -> list[BaseEvent]:
        """Replay every event, optionally of one aggregate type, in append order.

        Raises:
            PersistenceError: If the query fails.
        """
        engine = self._require_engine("replay_all")

        try:
            async with engine.begin() as conn:
                query = select(schema_history_table).order_by(schema_history_table.c.sequence)
                if aggregate_type:
                    query = query.where(schema_history_table.c.aggregate_type == aggregate_type)

                result = await conn.execute(query)
                rows = result.mappings().all()
                return [BaseEvent.from_db_row(dict(row)) for row in rows]
        except Exception as e:
            raise PersistenceError(
                f"Failed to replay events: {e}",
                operation="select",
                table="schema_history",
                details={"aggregate_type": aggregate_type},
            ) from e

    async def close(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
