"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

PushAuthMode = Literal["auto", "oauth", "legacy"]


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    firebase_service_account: str | None = Field(
        default=None,
        description="Service account JSON document used to mint OAuth2 access tokens",
    )
    firebase_service_account_path: str | None = Field(
        default=None,
        description="Path to a service account JSON file, used when the inline JSON is not set",
    )
    fcm_server_key: str | None = Field(
        default=None,
        description="Legacy server key sent as 'key=<value>' when OAuth is not used",
    )
    fcm_project_id: str | None = Field(
        default=None,
        description="Push gateway project identifier; overrides the service account value",
    )
    push_auth_mode: PushAuthMode = Field(
        default="auto",
        description="Authentication strategy for the push gateway: auto, oauth or legacy",
    )
    fcm_base_url: str = Field(
        default="https://fcm.googleapis.com",
        description="Base URL of the push gateway send API",
    )
    oauth_token_url: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="OAuth2 token endpoint used for the JWT bearer grant",
    )
    fcm_scope: str = Field(
        default="https://www.googleapis.com/auth/firebase.messaging",
        description="OAuth2 scope requested for push delivery",
    )
    push_request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every outbound push and OAuth request",
        gt=0,
    )
    push_batch_size: int = Field(
        default=10,
        description="Maximum number of queued notifications claimed per drain",
        gt=0,
    )
    push_claim_timeout_seconds: int = Field(
        default=300,
        description="Seconds after which a notification left in 'processing' may be reclaimed",
        gt=0,
    )
    push_android_channel_id: str = Field(
        default="chat_messages",
        description="Android notification channel used for chat messages",
        min_length=1,
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
    sendgrid_sender_name: str | None = Field(
        default=None,
        description="Display name attached to the sender address",
    )
    mailgun_api_key: str | None = Field(
        default=None,
        description="Mailgun API key, used when SendGrid is not configured",
    )
    mailgun_domain: str | None = Field(
        default=None,
        description="Mailgun sending domain",
    )
    resend_api_key: str | None = Field(
        default=None,
        description="Resend API key, used when neither SendGrid nor Mailgun is configured",
    )
    email_sender: str = Field(
        default="noreply@edubazaar.com",
        description="Sender address for emails sent through Mailgun or Resend",
        min_length=3,
    )
    email_sender_name: str = Field(
        default="EduBazaar Team",
        description="Sender display name for emails sent through Mailgun or Resend",
    )
    allowed_origins: str = Field(
        default="*",
        description="Comma separated list of origins allowed by the CORS middleware",
    )

    @model_validator(mode="after")
    def _validate_email_providers(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        if bool(self.mailgun_api_key) ^ bool(self.mailgun_domain):
            raise ValueError("MAILGUN_API_KEY and MAILGUN_DOMAIN must both be provided to enable email")
        if "@" not in self.email_sender:
            raise ValueError("EMAIL_SENDER must be a valid email address")
        return self

    @model_validator(mode="after")
    def _validate_legacy_project(self) -> "Settings":
        if self.push_auth_mode == "legacy":
            if not self.fcm_server_key:
                raise ValueError("FCM_SERVER_KEY is required when PUSH_AUTH_MODE=legacy")
            if not self.fcm_project_id:
                raise ValueError("FCM_PROJECT_ID is required when PUSH_AUTH_MODE=legacy")
        return self

    def cors_origins(self) -> list[str]:
        """Return the configured CORS origins as a list."""

        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["PushAuthMode", "Settings", "get_settings", "reset_settings_cache"]
