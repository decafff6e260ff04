"""Application configuration from environment variables."""

from functools import lru_cache

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
    app_name: str = "Workout Session Engine"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database (local SQLite by default; any async SQLAlchemy URL works)
    database_url: str = "sqlite+aiosqlite:///./workouts.db"
    auto_create_tables: bool = True  # Use Alembic in production

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # Session engine
    default_rest_seconds: int = 90
    tick_interval_seconds: float = 1.0
    pr_banner_seconds: float = 3.0

    @property
    def sync_database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        return (
            self.database_url.replace("+aiosqlite", "")
            .replace("+asyncpg", "+psycopg")
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
