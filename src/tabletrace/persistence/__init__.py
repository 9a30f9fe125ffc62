"""tabletrace persistence module - durable schema history log."""

from tabletrace.persistence.event_store import EventStore
from tabletrace.persistence.schema import metadata, schema_history_table

__all__ = [
    "EventStore",
    "metadata",
    "schema_history_table",
]
