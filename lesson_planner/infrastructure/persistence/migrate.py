"""
Schema migration entry point.

Upgrades the database to the latest Alembic revision. Called once at
start-up, before the application serves traffic.
"""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from lesson_planner.domain.errors import MigrationError

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def build_alembic_config(url: str) -> Config:
    """Build an in-memory Alembic config pointing at the bundled scripts."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation: escape literal percent signs in passwords.
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return config


def migrate_database(url: str, revision: str = "head") -> None:
    """Upgrade the schema at ``url`` to ``revision``.

    Raises:
        MigrationError: If Alembic fails for any reason. Start-up must
            not continue with an unmigrated schema.
    """
    logger.info("Migrating database schema to %s.", revision)
    try:
        command.upgrade(build_alembic_config(url), revision)
    except Exception as exc:
        logger.exception("Database migration failed.")
        raise MigrationError(str(exc)) from exc
    logger.info("Database schema is up to date.")
