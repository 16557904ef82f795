"""SQLAlchemy Core table definitions for scheduled and favourite sensables."""

from sqlalchemy import (
    MetaData,
    Table,
    Column,
    String,
    Integer,
    Text,
    DateTime,
    CheckConstraint,
    Index,
    func,
)

metadata = MetaData()

scheduled_entries = Table(
    "scheduled_entries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("feed_id", String, nullable=False),
    Column("name", String),
    Column("unit", String),
    Column("sample", Text),  # JSON-encoded Sample
    Column("pending", Integer, nullable=False, server_default="0"),
    Column(
        "updated_at",
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    ),
    CheckConstraint("pending IN (0, 1)", name="chk_scheduled_entries_pending"),
)

Index("idx_scheduled_entries_pending", scheduled_entries.c.pending)
Index("idx_scheduled_entries_feed_id", scheduled_entries.c.feed_id)

favourite_entries = Table(
    "favourite_entries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("feed_id", String, nullable=False, unique=True),
    Column("name", String),
    Column("unit", String),
    Column("sample", Text),  # JSON-encoded Sample
    Column(
        "updated_at",
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    ),
)
