"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded for production)
    - get_settings() is cached (lru_cache), single instance per process
    - Empty ANTHROPIC_API_KEY selects the offline fallback summarizer

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://taskhub:taskhub@db:5432/taskhub"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = "change-me-in-production-this-is-not-a-secret"
    jwt_algorithm: str = "HS256"
    jwt_expires_in_seconds: int = 7 * 24 * 60 * 60
    password_hash_rounds: int = 10
    allow_admin_registration: bool = False

    # Summarizer (Anthropic); empty key means offline fallback
    anthropic_api_key: str = ""
    summary_model: str = "claude-haiku-4-5-20251001"
    summary_max_tokens: int = 200
    summary_timeout_seconds: int = 30

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    environment: str = "production"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
