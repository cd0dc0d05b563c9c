"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Protects write endpoints against resource abuse.

Each application builds its own limiter, so two apps in one process
never share counters or the enabled switch.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from lesson_planner.shared.errors.handlers import error_body

DEFAULT_RATE_LIMIT = "60/minute"


def build_limiter(enabled: bool = True) -> Limiter:
    """Create a limiter keyed on the client address."""
    return Limiter(key_func=get_remote_address, enabled=enabled)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    return JSONResponse(
        status_code=429,
        content=error_body("Rate limit exceeded", str(exc.detail)),
    )
