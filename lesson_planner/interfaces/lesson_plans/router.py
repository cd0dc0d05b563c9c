"""
FastAPI router for the lesson plans context.

All routes delegate to LessonPlanAppService. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.

The router is built per application so the write route is bound to that
application's limiter.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter

from lesson_planner.application.lesson_plans.service import LessonPlanAppService
from lesson_planner.interfaces.lesson_plans.dependencies import (
    get_lesson_plan_service,
)
from lesson_planner.interfaces.lesson_plans.schemas import (
    CreateLessonPlanRequest,
    DeleteLessonPlanResponse,
    LessonPlanListResponse,
    LessonPlanResponse,
)
from lesson_planner.interfaces.schemas import ErrorResponse
from lesson_planner.shared.security.rate_limiting import DEFAULT_RATE_LIMIT


def build_router(limiter: Limiter) -> APIRouter:
    """Create the ``/lesson-plans`` routes, rate limited by ``limiter``."""
    router = APIRouter(prefix="/lesson-plans", tags=["lesson-plans"])

    @router.post(
        "",
        response_model=LessonPlanResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
        summary="Create a lesson plan",
        description="Create a lesson plan owned by the user in the UserId header.",
    )
    @limiter.limit(DEFAULT_RATE_LIMIT)
    def create_lesson_plan(
        request: Request,
        payload: CreateLessonPlanRequest,
        service: LessonPlanAppService = Depends(get_lesson_plan_service),
    ) -> LessonPlanResponse:
        """Create a lesson plan."""
        dto = service.create(
            title=payload.title,
            subject=payload.subject,
            description=payload.description,
        )
        return LessonPlanResponse.model_validate(dto)

    @router.get(
        "",
        response_model=LessonPlanListResponse,
        summary="List lesson plans",
        description="List lesson plans, newest first.",
    )
    def list_lesson_plans(
        subject: Optional[str] = Query(None, max_length=100),
        limit: int = Query(50, ge=1, le=200),
        offset: int = Query(0, ge=0),
        service: LessonPlanAppService = Depends(get_lesson_plan_service),
    ) -> LessonPlanListResponse:
        """List lesson plans, optionally filtered by subject."""
        dtos = service.list(subject=subject, limit=limit, offset=offset)
        items = [LessonPlanResponse.model_validate(dto) for dto in dtos]
        return LessonPlanListResponse(items=items, count=len(items))

    @router.get(
        "/{lesson_plan_id}",
        response_model=LessonPlanResponse,
        responses={404: {"model": ErrorResponse}},
        summary="Get a lesson plan",
    )
    def get_lesson_plan(
        lesson_plan_id: UUID,
        service: LessonPlanAppService = Depends(get_lesson_plan_service),
    ) -> LessonPlanResponse:
        """Return one lesson plan."""
        return LessonPlanResponse.model_validate(service.get(lesson_plan_id))

    @router.delete(
        "/{lesson_plan_id}",
        response_model=DeleteLessonPlanResponse,
        responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        summary="Delete a lesson plan",
    )
    def delete_lesson_plan(
        lesson_plan_id: UUID,
        service: LessonPlanAppService = Depends(get_lesson_plan_service),
    ) -> DeleteLessonPlanResponse:
        """Delete one lesson plan."""
        service.delete(lesson_plan_id)
        return DeleteLessonPlanResponse(id=lesson_plan_id, deleted=True)

    return router
