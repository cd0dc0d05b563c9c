"""
Messages and Data Transfer Objects for the lesson plans context.

Commands, queries and events travel through the message bus.
Result DTOs carry data back to the interface layer.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from lesson_planner.domain.messages import Command, Event, Query


@dataclass(kw_only=True)
class CreateLessonPlanCommand(Command):
    """Input for creating a lesson plan.

    Attributes:
        title: Short title shown in listings.
        subject: Subject area.
        description: Free-form body of the plan.
        created_by: Id of the creating user.
    """

    title: str
    subject: str
    description: str = ""
    created_by: Optional[UUID] = None


@dataclass(kw_only=True)
class DeleteLessonPlanCommand(Command):
    """Input for deleting a lesson plan."""

    lesson_plan_id: UUID


@dataclass(kw_only=True)
class GetLessonPlanQuery(Query):
    """Input for fetching one lesson plan."""

    lesson_plan_id: UUID


@dataclass(kw_only=True)
class ListLessonPlansQuery(Query):
    """Input for listing lesson plans.

    Attributes:
        subject: Only list plans for this subject, if given.
        limit: Page size.
        offset: Number of plans to skip.
    """

    subject: Optional[str] = None
    limit: int = 50
    offset: int = 0


@dataclass(kw_only=True)
class LessonPlanCreatedEvent(Event):
    """Raised after a lesson plan was committed."""

    lesson_plan_id: UUID
    created_by: Optional[UUID] = None


@dataclass(frozen=True)
class LessonPlanDto:
    """Output DTO for a lesson plan."""

    id: UUID
    title: str
    subject: str
    description: str
    created_by: Optional[UUID]
    created_at: datetime
