"""Events persisted in the schema history log."""

from tabletrace.events.base import BaseEvent
from tabletrace.events.schema import (
    TABLE_AGGREGATE,
    create_schema_change_recorded,
    event_type_for,
)

__all__ = [
    "BaseEvent",
    "TABLE_AGGREGATE",
    "create_schema_change_recorded",
    "event_type_for",
]
