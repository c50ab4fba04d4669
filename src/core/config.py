"""Application configuration using Pydantic Settings v2.

Loads configuration from environment variables with .env file support.
All settings are validated at startup and available as typed attributes.
"""

from __future__ import annotations

import functools
import json
from typing import Any

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Headcount analytics service settings.

    Configuration is loaded from environment variables.
    A .env file in the project root is also read if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────
    app_name: str = "Headcount Analytics"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ── PostgreSQL ───────────────────────────────────────────────
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "training_platform"
    postgres_user: str = "training"
    postgres_password: str = "training_dev_password"
    database_url: str | None = None
    database_pool_size: int = 10
    database_max_overflow: int = 5

    # ── Backend ──────────────────────────────────────────────────
    backend_host: str = "0.0.0.0"  # noqa: S104 - container deployments  # nosec B104
    backend_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # ── Headcount Analytics ──────────────────────────────────────
    analytics_max_concurrency: int = 8
    analytics_gateway_timeout_seconds: float = 10.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from JSON string or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except (json.JSONDecodeError, TypeError):
                return [origin.strip() for origin in v.split(",")]
        if isinstance(v, list):
            return [str(item) for item in v]
        return ["http://localhost:3000"]

    @field_validator("analytics_max_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("analytics_max_concurrency must be at least 1")
        return v

    @field_validator("analytics_gateway_timeout_seconds")
    @classmethod
    def validate_gateway_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("analytics_gateway_timeout_seconds must be positive")
        return v

    @model_validator(mode="after")
    def build_database_url(self) -> Settings:
        """Build database_url from components if not set."""
        if not self.database_url:
            self.database_url = (
                f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        return self


@functools.lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
