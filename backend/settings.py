"""
Program delivery service settings, read from the environment or `.env`.

Inject with `Depends(get_settings)`; tests clear the cache between cases.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )

    # Supabase
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        return self.supabase_service_role_key

    # Session tokens issued by the coaching web app
    session_jwt_secret: str = Field(
        default="coaching-session-secret-change-in-production",
        description="Shared secret used to verify session tokens",
    )
    session_jwt_algorithm: str = Field(
        default="HS256",
        description="Signing algorithm of session tokens",
    )

    cron_secret: Optional[str] = Field(
        default=None,
        description="Shared secret the scheduler passes as ?secret= to cron endpoints",
    )

    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated extra origins allowed by CORS",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @property
    def extra_cors_origins(self) -> List[str]:
        """Parsed list of extra CORS origins."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance. Call get_settings.cache_clear() to reload."""
    return Settings()
