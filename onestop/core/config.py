# onestop/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime (and from a local
    `.env` file when present).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "One-Stop Staff Portal"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./one_stop.db",
        description="SQLAlchemy-compatible async database URL",
    )

    ADMIN_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /admin endpoints",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level (DEBUG/INFO/WARNING/ERROR).",
    )

    SEED_REFERENCE_DATA: bool = Field(
        default=True,
        description="Seed the static room catalog on startup if it is missing.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Settings are read and validated once per process and can be imported
    from anywhere in the app.
    """
    return Settings()
