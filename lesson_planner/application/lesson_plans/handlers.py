"""
Message handlers for the lesson plans context.

Each handler opens one unit of work for the message it handles,
runs the repository on that unit's connection, and commits.
Any failure rolls the transaction back and propagates to the bus caller.
"""

import logging
from typing import Any, Callable

from lesson_planner.application.lesson_plans.dtos import (
    CreateLessonPlanCommand,
    DeleteLessonPlanCommand,
    GetLessonPlanQuery,
    ListLessonPlansQuery,
)
from lesson_planner.domain.entities import LessonPlan
from lesson_planner.domain.errors import LessonPlanNotFoundError
from lesson_planner.domain.ports import (
    LessonPlanRepository,
    MessageBus,
    UnitOfWorkFactory,
)

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[Any], LessonPlanRepository]


class LessonPlanHandlers:
    """Handlers for every lesson plan command and query.

    Args:
        uow_factory: Creates a fresh unit of work per message.
        repository_factory: Builds a repository on a unit of work's
            connection.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        repository_factory: RepositoryFactory,
    ) -> None:
        self._uow_factory = uow_factory
        self._repository_factory = repository_factory

    def register(self, bus: MessageBus) -> None:
        """Register every handler on the bus."""
        bus.register(CreateLessonPlanCommand, self.create)
        bus.register(DeleteLessonPlanCommand, self.delete)
        bus.register(GetLessonPlanQuery, self.get)
        bus.register(ListLessonPlansQuery, self.list_plans)

    def create(self, command: CreateLessonPlanCommand) -> LessonPlan:
        lesson_plan = LessonPlan(
            title=command.title,
            subject=command.subject,
            description=command.description,
            created_by=command.created_by,
        )
        with self._uow_factory() as uow:
            uow.begin_tran()
            self._repository_factory(uow.connection).add(lesson_plan)
            uow.commit()

        logger.info(
            "Created lesson plan id=%s by=%s",
            lesson_plan.id,
            command.audit_user_name,
        )
        return lesson_plan

    def delete(self, command: DeleteLessonPlanCommand) -> None:
        """Delete a lesson plan.

        Raises:
            LessonPlanNotFoundError: If no plan has that id.
        """
        with self._uow_factory() as uow:
            uow.begin_tran()
            deleted = self._repository_factory(uow.connection).delete(
                command.lesson_plan_id
            )
            if not deleted:
                raise LessonPlanNotFoundError(str(command.lesson_plan_id))
            uow.commit()

        logger.info(
            "Deleted lesson plan id=%s by=%s",
            command.lesson_plan_id,
            command.audit_user_name,
        )

    def get(self, query: GetLessonPlanQuery) -> LessonPlan:
        """Fetch a lesson plan.

        Raises:
            LessonPlanNotFoundError: If no plan has that id.
        """
        with self._uow_factory() as uow:
            lesson_plan = self._repository_factory(uow.connection).get_by_id(
                query.lesson_plan_id
            )
        if lesson_plan is None:
            raise LessonPlanNotFoundError(str(query.lesson_plan_id))
        return lesson_plan

    def list_plans(self, query: ListLessonPlansQuery) -> list[LessonPlan]:
        with self._uow_factory() as uow:
            return self._repository_factory(uow.connection).find_all(
                subject=query.subject,
                limit=query.limit,
                offset=query.offset,
            )
