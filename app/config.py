"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates" / "notifications"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to stamp and compare notification dates",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    notification_retention_days: int = Field(
        default=60,
        description="Notifications older than this number of days are purged",
        gt=0,
    )
    notification_cleanup_schedule: str = Field(
        default="0 2 * * *",
        description="Crontab expression (5 fields) for the retention cleanup job",
        min_length=1,
    )
    notification_cleanup_enabled: bool = Field(
        default=True,
        description="Whether the retention cleanup job is scheduled at startup",
    )
    notification_cleanup_batch_size: int = Field(
        default=500,
        description="Number of notifications deleted per cleanup batch",
        gt=0,
    )
    notification_templates_dir: Path = Field(
        default=DEFAULT_TEMPLATES_DIR,
        description="Folder holding one sub-folder per notification template",
    )
    directory_batch_size: int = Field(
        default=20,
        description="Maximum number of concurrent deputy lookups against the directory",
        gt=0,
    )
    default_channels: str = Field(
        default="in_app,email",
        description="Comma separated channels used when a request does not name any",
        min_length=1,
    )
    cors_origins: str = Field(
        default="http://localhost:4200",
        description="Comma separated origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def default_channel_names(self) -> list[str]:
        """Return the configured default channels as a clean list."""

        return [name.strip() for name in self.default_channels.split(",") if name.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
