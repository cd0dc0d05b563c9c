"""
Secure HTTP headers.

Every response carries the baseline headers. API responses are JSON
only, so they get a deny-all Content-Security-Policy and must not be
cached. The HTML docs pages get a policy that lets Swagger UI and ReDoc
load their CDN assets.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

BASELINE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
}

API_CSP = "default-src 'none'; frame-ancestors 'none'"
DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://fonts.googleapis.com; "
    "font-src 'self' https://fonts.gstatic.com; "
    "img-src 'self' data: https://fastapi.tiangolo.com; "
    "worker-src 'self' blob:; "
    "frame-ancestors 'none'"
)
DOCS_PATHS = ("/docs", "/redoc")


def security_headers(path: str) -> dict[str, str]:
    """Return the headers a response for ``path`` must carry."""
    headers = dict(BASELINE_HEADERS)
    if path.startswith(DOCS_PATHS):
        headers["Content-Security-Policy"] = DOCS_CSP
    else:
        headers["Content-Security-Policy"] = API_CSP
        headers["Cache-Control"] = "no-store"
    return headers


def apply_security_headers(response: Response, path: str) -> Response:
    response.headers.update(security_headers(path))
    return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamps :func:`security_headers` on every routed response.

    Responses produced outside this middleware (a fault answered by the
    request logging middleware) call :func:`apply_security_headers`
    themselves.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        return apply_security_headers(response, request.url.path)
