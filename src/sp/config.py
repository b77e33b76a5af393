"""Configuration settings for the Study Planner service."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "Study Planner"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Database
    # Default to Postgres; tests override via SP_DB_URL
    db_url: str = "postgresql+asyncpg://localhost/study_planner"
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Auth
    jwt_secret: str = "change-me"
    jwt_issuer: str = "study-planner"
    jwt_audience: str = "study-planner"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24 * 7
    bcrypt_rounds: int = 12

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Rate Limiting
    rate_limit_backend: Literal["redis", "memory"] = "redis"
    rate_limit_requests: int = 100
    rate_limit_window: int = 15 * 60  # seconds

    # Generative text (plan generation falls back to templates when unset)
    openai_api_key: Optional[str] = None
    openai_base: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 30.0
    openai_temperature: float = 0.7


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
