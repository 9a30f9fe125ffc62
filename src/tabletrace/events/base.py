"""Base event definition for the schema history log.

Events are immutable (frozen Pydantic models) and follow the
dot.notation.past_tense naming convention.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class BaseEvent(BaseModel, frozen=True):
    """Base class for all persisted events.

    Attributes:
        id: Unique event identifier (UUID).
        type: Event type, e.g. "schema.table.created_recorded".
        timestamp: When the event occurred (UTC).
        aggregate_type: Type of aggregate this event belongs to.
        aggregate_id: Identifier of the aggregate.
        data: Event-specific payload data.
        sequence: Append position assigned by the store; None until stored.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    aggregate_type: str
    aggregate_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    sequence: int | None = None

    def to_db_dict(self) -> dict[str, Any]:
        """Convert event to a row of the schema_history table."""
        return {
            "id": self.id,
            "event_type": self.type,
            "timestamp": self.timestamp,
            "aggregate_type": self.aggregate_type,
            "aggregate_id": self.aggregate_id,
            "payload": self.data,
        }

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> BaseEvent:
        """Create an event from a schema_history row."""
        return cls(
            id=row["id"],
            type=row["event_type"],
            timestamp=row["timestamp"],
            aggregate_type=row["aggregate_type"],
            aggregate_id=row["aggregate_id"],
            data=row["payload"],
            sequence=row.get("sequence"),
        )
