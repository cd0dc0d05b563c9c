"""
Shared fixtures.

Every test that touches the database gets its own SQLite file under
pytest's tmp_path, migrated with the real Alembic scripts.
"""

from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from lesson_planner.core.config import Settings
from lesson_planner.infrastructure.persistence.database import create_engine_from_url
from lesson_planner.infrastructure.persistence.migrate import migrate_database
from lesson_planner.main import create_app

USER_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'lesson_planner.db'}"


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(
        lp_connection=database_url,
        rate_limit_enabled=False,
        log_level="DEBUG",
    )


@pytest.fixture
def engine(database_url):
    """Engine on a freshly migrated database."""
    migrate_database(database_url)
    engine = create_engine_from_url(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """TestClient with the lifespan (and so the migration) running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"UserId": str(USER_ID)}
