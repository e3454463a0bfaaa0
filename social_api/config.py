from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Follows 12-factor app configuration principles.
    """

    # env_file is only used as fallback, env vars take precedence
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./social_media.db"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    # Behaviour of GET /accounts/{id}/messages for an unknown account:
    # "error" -> 400 AccountNotFound, "empty" -> 200 with an empty list
    MISSING_ACCOUNT_POLICY: Literal["error", "empty"] = "error"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reading .env file on every request.
    """
    return Settings()


# Global settings instance
settings = get_settings()
