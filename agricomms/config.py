"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    storage_backend: Literal["memory", "database"] = Field(
        default="memory",
        description="Backend used to persist notifications, preferences and cooperative data",
    )
    database_url: str = Field(
        default="sqlite:///./agricomms.db",
        description="SQLAlchemy URL used when the database storage backend is selected",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Africa/Abidjan",
        description="Timezone used to stamp notifications and cooperative records",
    )
    notifications_namespace: str = Field(
        default="user_notifications",
        description="Key prefix for per-user notification lists",
        min_length=1,
    )
    preferences_namespace: str = Field(
        default="notification_preferences",
        description="Key prefix for per-user notification preferences",
        min_length=1,
    )
    low_stock_namespace: str = Field(
        default="merchant_lowstock_notified",
        description="Key prefix for products already reported as low on stock",
        min_length=1,
    )
    messages_namespace: str = Field(
        default="cooperative_messages",
        description="Key prefix for cooperative message lists",
        min_length=1,
    )
    announcements_namespace: str = Field(
        default="cooperative_announcements",
        description="Key prefix for cooperative announcement lists",
        min_length=1,
    )
    max_notifications: int = Field(
        default=1000,
        description="Maximum number of notifications retained per user",
        gt=0,
    )
    default_notification_limit: int = Field(
        default=50,
        description="Number of notifications returned when no limit is requested",
        gt=0,
    )
    notification_retention_days: int = Field(
        default=30,
        description="Age in days after which the cleanup routine drops notifications",
        gt=0,
    )
    max_notify_rounds: int = Field(
        default=5,
        description="Upper bound on listener rounds triggered by re-entrant mutations",
        gt=0,
    )
    seed_cooperative_fixtures: bool = Field(
        default=True,
        description="Seed empty cooperative registries with demonstration data",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
