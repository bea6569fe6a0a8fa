"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Form settings
    max_email_checks: int = 3  # Blur-time availability lookups per form cycle
    min_password_length: int = 6

    # Delays before the post-success transition (seconds)
    login_close_delay_seconds: float = 1.0
    register_reset_delay_seconds: float = 2.0
    reset_password_delay_seconds: float = 3.0

    # Session store
    session_limit: int = Field(default=1000, ge=1)  # Oldest form session is evicted beyond this

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000

    # Security settings
    bcrypt_cost: int = 10  # bcrypt work factor for the demo account directory


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
