"""
Centralized configuration for the portal client.

All settings are loaded from environment variables with sensible defaults.
Values can also be placed in a local .env file.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Authentication Portal"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend API
    api_base_url: str = "http://localhost:5000/api"
    request_timeout: float = 30.0  # seconds

    # Admin directory
    directory_page_size: int = 15
    min_admin_password_length: int = 6

    # Resend cooldowns
    resend_cooldown_seconds: int = 60

    # Contextual menu geometry (pixels)
    menu_panel_height: int = 220
    menu_panel_width: int = 192
    menu_gap: int = 4
    viewport_width: int = 1280
    viewport_height: int = 800


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
