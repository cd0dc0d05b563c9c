"""
Adapter: Lesson plan repository.

Implements LessonPlanRepository port.
Runs on the connection of the unit of work it was created for and
never commits: transaction boundaries belong to the unit of work.
"""

import logging
from datetime import timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Connection

from lesson_planner.domain.entities import LessonPlan
from lesson_planner.domain.ports import LessonPlanRepository
from lesson_planner.infrastructure.persistence.tables import lesson_plans

logger = logging.getLogger(__name__)


def _row_to_entity(row: Any) -> LessonPlan:
    """Convert a ``lesson_plans`` row to a LessonPlan entity."""
    created_at = row.created_at
    # SQLite drops the offset; stored values are always UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return LessonPlan(
        id=row.id,
        title=row.title,
        subject=row.subject,
        description=row.description,
        created_by=row.created_by,
        created_at=created_at,
    )


class SqlAlchemyLessonPlanRepository(LessonPlanRepository):
    """Persists lesson plans with SQLAlchemy Core statements."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def add(self, lesson_plan: LessonPlan) -> None:
        self._connection.execute(
            insert(lesson_plans).values(
                id=lesson_plan.id,
                title=lesson_plan.title,
                subject=lesson_plan.subject,
                description=lesson_plan.description,
                created_by=lesson_plan.created_by,
                created_at=lesson_plan.created_at,
            )
        )
        logger.debug("Inserted lesson plan id=%s.", lesson_plan.id)

    def get_by_id(self, lesson_plan_id: UUID) -> Optional[LessonPlan]:
        row = self._connection.execute(
            select(lesson_plans).where(lesson_plans.c.id == lesson_plan_id)
        ).first()
        return _row_to_entity(row) if row is not None else None

    def find_all(
        self, subject: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[LessonPlan]:
        """Return lesson plans, newest first.

        Args:
            subject: Only return plans for this subject, if given.
            limit: Maximum number of plans to return.
            offset: Number of plans to skip.
        """
        query = select(lesson_plans)
        if subject is not None:
            query = query.where(lesson_plans.c.subject == subject)
        query = (
            query.order_by(lesson_plans.c.created_at.desc(), lesson_plans.c.id)
            .limit(limit)
            .offset(offset)
        )
        return [_row_to_entity(row) for row in self._connection.execute(query)]

    def delete(self, lesson_plan_id: UUID) -> bool:
        result = self._connection.execute(
            delete(lesson_plans).where(lesson_plans.c.id == lesson_plan_id)
        )
        return result.rowcount > 0
