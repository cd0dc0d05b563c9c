"""
Application service: Lesson plans.

Input: request-scoped user, transport-level arguments.
Output: LessonPlanDto instances.
Side effects: Dispatches commands/queries; publishes LessonPlanCreatedEvent.
Failure cases: UserRequiredError, LessonPlanNotFoundError.
"""

import logging
from typing import Optional
from uuid import UUID

from lesson_planner.application.common.base_app_service import BaseAppService
from lesson_planner.application.lesson_plans.dtos import (
    CreateLessonPlanCommand,
    DeleteLessonPlanCommand,
    GetLessonPlanQuery,
    LessonPlanCreatedEvent,
    LessonPlanDto,
    ListLessonPlansQuery,
)
from lesson_planner.domain.errors import UserRequiredError

logger = logging.getLogger(__name__)


class LessonPlanAppService(BaseAppService):
    """Orchestrates lesson plan use cases for the HTTP layer.

    Every operation goes through the message bus; results are mapped
    to DTOs with the object mapper.
    """

    def create(
        self, title: str, subject: str, description: str = ""
    ) -> LessonPlanDto:
        """Create a lesson plan owned by the current user.

        Raises:
            UserRequiredError: If the request carried no ``UserId``.
        """
        if self.current_user is None:
            raise UserRequiredError("create a lesson plan")

        command = self.audit(
            CreateLessonPlanCommand(
                title=title,
                subject=subject,
                description=description,
                created_by=self.current_user.id,
            )
        )
        lesson_plan = self.message_bus.send(command)

        self.message_bus.publish(
            self.audit(
                LessonPlanCreatedEvent(
                    lesson_plan_id=lesson_plan.id,
                    created_by=lesson_plan.created_by,
                )
            )
        )
        return self.mapper.map(lesson_plan, LessonPlanDto)

    def get(self, lesson_plan_id: UUID) -> LessonPlanDto:
        query = self.audit(GetLessonPlanQuery(lesson_plan_id=lesson_plan_id))
        return self.mapper.map(self.message_bus.send(query), LessonPlanDto)

    def list(
        self, subject: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[LessonPlanDto]:
        query = self.audit(
            ListLessonPlansQuery(subject=subject, limit=limit, offset=offset)
        )
        plans = self.message_bus.send(query)
        logger.debug("Listed %d lesson plans (subject=%s).", len(plans), subject)
        return [self.mapper.map(plan, LessonPlanDto) for plan in plans]

    def delete(self, lesson_plan_id: UUID) -> None:
        """Delete a lesson plan.

        Raises:
            UserRequiredError: If the request carried no ``UserId``.
            LessonPlanNotFoundError: If no plan has that id.
        """
        if self.current_user is None:
            raise UserRequiredError("delete a lesson plan")
        self.message_bus.send(
            self.audit(DeleteLessonPlanCommand(lesson_plan_id=lesson_plan_id))
        )
