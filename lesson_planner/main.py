"""
Application entry point.

Creates the FastAPI application and wires together:
- The dependency graph (infrastructure, mapping, application modules)
- Database migration at start-up
- Middleware chain (request logging outermost, then security
  headers, then the response envelope)
- Error handlers (centralized domain-to-HTTP mapping)
- Rate limiting and routers

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from lesson_planner.core.config import Settings
from lesson_planner.core.container import build_container
from lesson_planner.infrastructure.persistence.migrate import migrate_database
from lesson_planner.interfaces.api_router import build_api_router
from lesson_planner.shared.errors.handlers import register_error_handlers
from lesson_planner.shared.logging import configure_logging, get_request_logger
from lesson_planner.shared.middleware.response_wrapper import (
    ApiResponseWrapperMiddleware,
)
from lesson_planner.shared.middleware.server_middleware import (
    RequestLoggingMiddleware,
)
from lesson_planner.shared.security.headers import SecurityHeadersMiddleware
from lesson_planner.shared.security.rate_limiting import (
    build_limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: migrate the schema, then serve; dispose on stop.

    A migration failure raises and aborts start-up. The engine is
    disposed on every exit path.
    """
    container = app.state.container
    try:
        if container.settings.run_migrations_on_startup:
            migrate_database(container.settings.lp_connection)
        yield
    finally:
        container.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root of the application. It runs once per
    process; every binding it makes lives for the whole process.

    Args:
        settings: Settings to use. Loaded from configuration sources
            when omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or Settings()
    configure_logging(level=settings.log_level)
    logger.info("Starting up %s (%s)", settings.project_name, settings.environment)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.container = build_container(settings)

    # --- Rate Limiting ---
    limiter = build_limiter(enabled=settings.rate_limit_enabled)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Middleware (last added runs outermost) ---
    app.add_middleware(ApiResponseWrapperMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RequestLoggingMiddleware,
        logger=get_request_logger(),
        suppress_exceptions=settings.suppress_unhandled_exceptions,
    )

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(build_api_router(limiter))

    return app


app = create_app()
