"""
SQLAlchemy engine construction.

Both the running application and the Alembic environment build their
engine here from the same ``LPConnection`` setting.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from lesson_planner.core.config import Settings

logger = logging.getLogger(__name__)


def create_engine_from_url(url: str, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the given connection string.

    SQLite connections are shared across FastAPI's worker threads, so
    the same-thread check is disabled for them.

    Args:
        url: Database connection URL.
        echo: If True, log all emitted SQL statements.

    Returns:
        A configured Engine.
    """
    parsed = make_url(url)
    connect_args: dict = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False

    engine = create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
    logger.info(
        "Created engine for %s",
        parsed.render_as_string(hide_password=True),
    )
    return engine


def create_engine_from_settings(settings: Settings) -> Engine:
    """Build the engine from application settings."""
    return create_engine_from_url(settings.lp_connection, echo=settings.sql_echo)
