"""
Server middleware contract and the request logging middleware.

Per request: Received -> Processing -> (Succeeded | Faulted) -> Logged
-> Completed. The logging middleware is the outermost layer so it can
time and observe faults from everything inside it.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from lesson_planner.application.common.user_context import USER_ID_HEADER
from lesson_planner.shared.errors.handlers import error_body
from lesson_planner.shared.logging import get_request_logger
from lesson_planner.shared.middleware.envelope import build_envelope
from lesson_planner.shared.security.headers import apply_security_headers

REQUEST_ID_HEADER = "X-Request-ID"
MESSAGE_TEMPLATE = "HTTP %s %s responded %d in %.4f ms"

# Never copied into log records.
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "proxy-authorization", "x-api-key"})


class ServerMiddleware(ABC):
    """Contract for request interception with fault capture."""

    @abstractmethod
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Run the rest of the pipeline, measuring elapsed time."""
        raise NotImplementedError

    @abstractmethod
    def log_exception(self, request: Request, elapsed_ms: float, exc: Exception) -> bool:
        """Log an unhandled fault.

        Returns:
            True if the fault is handled and must not propagate further.
        """
        raise NotImplementedError

    @abstractmethod
    def log_for_error_context(self, request: Request) -> logging.LoggerAdapter:
        """Return a logger enriched with this request's context."""
        raise NotImplementedError


class RequestLoggingMiddleware(BaseHTTPMiddleware, ServerMiddleware):
    """Times and logs every request; captures unhandled exceptions.

    Args:
        app: The wrapped ASGI application.
        logger: Logging handle. Defaults to the HTTP request logger.
        suppress_exceptions: When True, an unhandled exception is
            answered here with a 500 envelope. When False it is
            re-raised to the application's global error handler.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: Optional[logging.Logger] = None,
        suppress_exceptions: bool = True,
    ) -> None:
        super().__init__(app)
        self._logger = logger or get_request_logger()
        self._suppress_exceptions = suppress_exceptions

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            if not self.log_exception(request, elapsed_ms, exc):
                raise
            response = JSONResponse(
                status_code=500,
                content=build_envelope(500, error_body("Internal server error")),
            )
            # Built outside the security headers middleware.
            apply_security_headers(response, request.url.path)
        else:
            elapsed_ms = (time.perf_counter() - start) * 1000
            level = logging.ERROR if response.status_code > 499 else logging.INFO
            self._logger.log(
                level,
                MESSAGE_TEMPLATE,
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response

    def log_exception(self, request: Request, elapsed_ms: float, exc: Exception) -> bool:
        self.log_for_error_context(request).error(
            MESSAGE_TEMPLATE,
            request.method,
            request.url.path,
            500,
            elapsed_ms,
            exc_info=exc,
        )
        return self._suppress_exceptions

    def log_for_error_context(self, request: Request) -> logging.LoggerAdapter:
        headers = {
            key: value
            for key, value in request.headers.items()
            if key.lower() not in SENSITIVE_HEADERS
        }
        return logging.LoggerAdapter(
            self._logger,
            {
                "request_id": getattr(request.state, "request_id", None),
                "request_host": request.url.hostname,
                "request_protocol": request.url.scheme,
                "request_headers": headers,
                "user_id": request.headers.get(USER_ID_HEADER),
            },
        )
