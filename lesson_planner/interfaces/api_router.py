"""Versioned API router aggregating every context's routes."""

from fastapi import APIRouter
from slowapi import Limiter

from lesson_planner.interfaces.health import router as health_router
from lesson_planner.interfaces.lesson_plans.router import build_router


def build_api_router(limiter: Limiter) -> APIRouter:
    api_router = APIRouter(prefix="/api/v1")
    api_router.include_router(health_router)
    api_router.include_router(build_router(limiter))
    return api_router
