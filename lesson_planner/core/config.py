"""
Application configuration.

Loads settings from JSON configuration files, a .env file and
environment variables. All configuration is centralized here.

Precedence, lowest to highest:
    1. Field defaults
    2. appsettings.json
    3. appsettings.{ENVIRONMENT}.json
    4. .env file
    5. Environment variables
    6. Keyword arguments passed to Settings()

The overlay in step 3 is named after the environment as resolved from
the higher layers (keyword arguments, environment variables, .env, then
appsettings.json).
"""

from typing import Any, Optional, Tuple, Type

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

APPSETTINGS_FILE = "appsettings.json"
DEFAULT_CONNECTION = "sqlite:///./lesson_planner.db"
CONNECTION_KEYS = ("LPConnection", "LP_CONNECTION", "lp_connection")
DEFAULT_ENVIRONMENT = "Production"


def _environment_from(data: dict[str, Any]) -> Optional[str]:
    for key in ("environment", "ENVIRONMENT", "Environment"):
        if data.get(key):
            return str(data[key])
    return None


def _resolve_environment(*sources: PydanticBaseSettingsSource) -> str:
    """Return the environment name from the first source that sets one.

    Sources are given highest precedence first, so the overlay file is
    picked by the same value ``Settings.environment`` ends up with.
    """
    for source in sources:
        environment = _environment_from(source())
        if environment:
            return environment
    return DEFAULT_ENVIRONMENT


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        environment: Deployment environment name. Selects the
            appsettings.{environment}.json overlay.
        debug: Enable debug mode (exposes /docs). Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        lp_connection: Database connection string. Read from
            ``LPConnection`` or ``ConnectionStrings.LPConnection``.
        sql_echo: Log every SQL statement.
        run_migrations_on_startup: Upgrade the schema before serving traffic.
        suppress_unhandled_exceptions: Let the request logging middleware
            answer unhandled exceptions itself instead of re-raising them.
        rate_limit_enabled: Enforce per-client rate limits on write endpoints.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "Lesson Planner"
    version: str = "0.1.0"
    environment: str = DEFAULT_ENVIRONMENT
    debug: bool = False
    log_level: str = "INFO"
    lp_connection: str = Field(
        default=DEFAULT_CONNECTION,
        validation_alias=AliasChoices(*CONNECTION_KEYS),
    )
    sql_echo: bool = False
    run_migrations_on_startup: bool = True
    suppress_unhandled_exceptions: bool = True
    rate_limit_enabled: bool = True

    @model_validator(mode="before")
    @classmethod
    def _read_nested_connection_string(cls, data: Any) -> Any:
        """Accept ``ConnectionStrings.LPConnection`` from JSON configuration.

        A flat ``LPConnection`` value from any source takes precedence.
        """
        if not isinstance(data, dict) or any(key in data for key in CONNECTION_KEYS):
            return data
        nested = data.get("ConnectionStrings")
        if isinstance(nested, dict) and "LPConnection" in nested:
            data = {**data, "LPConnection": nested["LPConnection"]}
        return data

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        base_json = JsonConfigSettingsSource(settings_cls, json_file=APPSETTINGS_FILE)
        environment = _resolve_environment(
            init_settings, env_settings, dotenv_settings, base_json
        )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(
                settings_cls,
                json_file=(APPSETTINGS_FILE, f"appsettings.{environment}.json"),
            ),
            file_secret_settings,
        )
