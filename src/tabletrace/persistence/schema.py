"""Database schema definitions using SQLAlchemy Core.

Table: schema_history
    Append-only log of applied schema changes. The autoincrement sequence
    column records append order, which is the order changes are replayed in.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    text,
)

metadata = MetaData()

schema_history_table = Table(
    "schema_history",
    metadata,
    # Append position; replay follows this order
    Column("sequence", Integer, primary_key=True, autoincrement=True),
    Column("id", String(36), nullable=False, unique=True),
    Column("aggregate_type", String(100), nullable=False),
    # Dotted table identifier, e.g. "inventory.dbo.orders"
    Column("aggregate_id", String(512), nullable=False),
    Column("event_type", String(200), nullable=False),
    Column("payload", JSON, nullable=False),
    Column(
        "timestamp",
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    Index("ix_schema_history_aggregate", "aggregate_type", "aggregate_id"),
    Index("ix_schema_history_event_type", "event_type"),
)
