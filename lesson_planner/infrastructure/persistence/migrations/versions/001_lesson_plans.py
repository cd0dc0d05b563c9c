"""Initial schema: lesson plans.

Revision ID: 001_lesson_plans
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_lesson_plans"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "lesson_plans",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_lesson_plans_subject", "lesson_plans", ["subject"])
    op.create_index("ix_lesson_plans_created_at", "lesson_plans", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_lesson_plans_created_at", table_name="lesson_plans")
    op.drop_index("ix_lesson_plans_subject", table_name="lesson_plans")
    op.drop_table("lesson_plans")
