"""Application configuration from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "RepLog API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Storage (local SQLite file holding the key-value store)
    database_path: str = "replog.db"
    database_timeout: float = 15.0
    storage_key: str = "gym-tracker-exercises"
    create_tables: bool = True

    # CORS: comma-separated list of allowed origins outside development
    cors_origins: str = ""

    def _build_db_url(self, scheme: str) -> str:
        path = Path(self.database_path).expanduser()
        return f"{scheme}:///{path.as_posix()}"

    @property
    def database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        return self._build_db_url(scheme="sqlite")

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (aiosqlite driver)."""
        return self._build_db_url(scheme="sqlite+aiosqlite")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
