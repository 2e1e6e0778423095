"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the web application, used for links inside emails",
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used for timestamps produced by the service",
    )
    default_user_timezone: str = Field(
        default="Australia/Sydney",
        description="Timezone assumed for users without notification preferences",
    )
    email_rate_limit_max: int = Field(
        default=10,
        description="Maximum number of immediate emails per user and window",
        gt=0,
    )
    email_rate_limit_window_seconds: int = Field(
        default=3600,
        description="Length of the email rate limit window in seconds",
        gt=0,
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis URL for sharing rate limit counters between processes",
    )
    unsubscribe_token_expire_days: int = Field(
        default=90,
        description="Number of days an unsubscribe link stays valid",
        gt=0,
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


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
