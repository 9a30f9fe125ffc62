"""Historized schema store: append-only log of applied schema changes."""

from tabletrace.history.base import HistoryRecord, InMemorySchemaHistory, SchemaHistory
from tabletrace.history.event_store import EventStoreSchemaHistory

__all__ = [
    "EventStoreSchemaHistory",
    "HistoryRecord",
    "InMemorySchemaHistory",
    "SchemaHistory",
]
