"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error bodies use the {"error", "detail"} shape; the response
wrapper middleware folds them into the standard envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lesson_planner.domain.errors import (
    HandlerNotFoundError,
    InvalidUserIdError,
    LessonPlanNotFoundError,
    LessonPlannerError,
    UnitOfWorkStateError,
    UserRequiredError,
)
from lesson_planner.shared.middleware.envelope import build_envelope
from lesson_planner.shared.security.headers import apply_security_headers

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_404 = 404
HTTP_500 = 500


def error_body(error: str, detail: str | None = None) -> dict[str, str]:
    """Build a consistent error payload."""
    body: dict[str, str] = {"error": error}
    if detail:
        body["detail"] = detail
    return body


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    return JSONResponse(status_code=status_code, content=error_body(error, detail))


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(InvalidUserIdError)
    async def handle_invalid_user_id(
        _request: Request, exc: InvalidUserIdError
    ) -> JSONResponse:
        """Handle a malformed UserId header."""
        logger.warning("Rejected malformed UserId header.")
        return _error_response(HTTP_400, "Invalid UserId header", "UserId must be a UUID")

    @app.exception_handler(UserRequiredError)
    async def handle_user_required(
        _request: Request, exc: UserRequiredError
    ) -> JSONResponse:
        """Handle operations attempted without a current user."""
        logger.warning("User required to %s", exc.operation)
        return _error_response(HTTP_401, "User required", exc.message)

    @app.exception_handler(LessonPlanNotFoundError)
    async def handle_lesson_plan_not_found(
        _request: Request, exc: LessonPlanNotFoundError
    ) -> JSONResponse:
        """Handle missing lesson plan errors."""
        logger.warning("Lesson plan not found: %s", exc.lesson_plan_id)
        return _error_response(HTTP_404, "Lesson plan not found")

    @app.exception_handler(UnitOfWorkStateError)
    async def handle_unit_of_work_state(
        _request: Request, exc: UnitOfWorkStateError
    ) -> JSONResponse:
        """Unit-of-work misuse is a programming error."""
        logger.error("Unit of work misuse: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(HandlerNotFoundError)
    async def handle_handler_not_found(
        _request: Request, exc: HandlerNotFoundError
    ) -> JSONResponse:
        """A message was dispatched that nothing handles."""
        logger.error("No handler for message type: %s", exc.message_type)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(LessonPlannerError)
    async def handle_lesson_planner(
        _request: Request, exc: LessonPlannerError
    ) -> JSONResponse:
        """Catch-all for unhandled lesson planner errors."""
        logger.error("Unhandled lesson planner error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals.

        Runs outside the middleware stack, so it builds the envelope and
        the security headers itself.
        """
        logger.error("Unexpected error: %s", type(exc).__name__)
        response = JSONResponse(
            status_code=HTTP_500,
            content=build_envelope(HTTP_500, error_body("Internal server error")),
        )
        return apply_security_headers(response, request.url.path)
