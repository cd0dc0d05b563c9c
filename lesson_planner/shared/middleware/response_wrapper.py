"""
Response wrapper middleware.

Wraps every JSON response body in the uniform API envelope.
Non-JSON responses and the OpenAPI/docs routes pass through untouched.
"""

import json

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from lesson_planner.shared.middleware.envelope import API_VERSION, build_envelope

EXCLUDED_PATHS = ("/openapi.json", "/docs", "/redoc")

_DROPPED_HEADERS = (b"content-length", b"content-type")


class ApiResponseWrapperMiddleware(BaseHTTPMiddleware):
    """Rewrites JSON responses into the ``ApiResponse`` envelope."""

    def __init__(
        self,
        app: ASGIApp,
        version: str = API_VERSION,
        excluded_paths: tuple[str, ...] = EXCLUDED_PATHS,
    ) -> None:
        super().__init__(app)
        self._version = version
        self._excluded_paths = excluded_paths

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if request.url.path.startswith(self._excluded_paths):
            return response
        if not response.headers.get("content-type", "").startswith("application/json"):
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        try:
            payload = json.loads(body) if body else None
        except ValueError:
            # Declared JSON but isn't; hand the bytes back unchanged.
            return Response(
                content=body,
                status_code=response.status_code,
                headers=dict(response.headers),
            )

        wrapped = JSONResponse(
            content=build_envelope(response.status_code, payload, self._version),
            status_code=response.status_code,
        )
        for key, value in response.headers.raw:
            if key.lower() not in _DROPPED_HEADERS:
                wrapped.raw_headers.append((key, value))
        return wrapped
