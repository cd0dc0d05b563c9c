"""
SQLAlchemy table definitions.

Every table uses a UUID primary key and UTC timestamps.
The metadata here is also the autogenerate target for Alembic.
"""

from sqlalchemy import Column, DateTime, Index, MetaData, String, Table, Text, Uuid

metadata = MetaData()

lesson_plans = Table(
    "lesson_plans",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("title", String(200), nullable=False),
    Column("subject", String(100), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("created_by", Uuid, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_lesson_plans_subject", "subject"),
    Index("ix_lesson_plans_created_at", "created_at"),
)
