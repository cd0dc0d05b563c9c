"""
Dependency injection for the lesson plans context.

Provides FastAPI dependency functions that build request-scoped
application services from the process-wide container.
"""

from fastapi import Request

from lesson_planner.application.lesson_plans.service import LessonPlanAppService
from lesson_planner.core.container import Container


def get_container(request: Request) -> Container:
    """Return the dependency graph built at start-up."""
    return request.app.state.container


def get_lesson_plan_service(request: Request) -> LessonPlanAppService:
    """Build LessonPlanAppService for the current request.

    Raises:
        InvalidUserIdError: If the request has a malformed UserId header.
    """
    container = get_container(request)
    return LessonPlanAppService(
        request=request,
        message_bus=container.message_bus,
        mapper=container.mapper,
    )
