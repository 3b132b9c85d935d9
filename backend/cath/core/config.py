# cath/core/config.py
"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "Court and tribunal hearings"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DB_AUTO_CREATE: bool = False

    # Sessions
    SESSION_SECRET_KEY: str
    SESSION_COOKIE_NAME: str = "cath_session"
    SESSION_MAX_AGE_SECONDS: int = 4 * 60 * 60

    # JWT Authentication (SSO / IDAM callback and publication API)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SSO_LOGIN_URL: str = "/login/callback"

    # Publication API (bearer tokens from upstream publishing systems)
    PUBLISHER_API_AUDIENCE: str = "cath-publication-api"
    PUBLISHER_API_ROLE: str = "api.publisher.user"

    # File storage
    STORAGE_BACKEND: str = "local"  # local | s3
    STORAGE_PATH: str = "storage/artefacts"
    UPLOAD_STAGING_PATH: str = "storage/pending-uploads"
    PENDING_UPLOAD_TTL_MINUTES: int = 60
    PENDING_UPLOAD_CLEANUP_INTERVAL_MINUTES: int = 15
    MAX_UPLOAD_SIZE: int = 2 * 1024 * 1024  # 2MB in bytes

    # AWS Configuration (S3 storage backend)
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "eu-west-2"
    S3_BUCKET_NAME: str = "cath-publications"
    S3_PREFIX: str = "artefacts"

    # GOV.UK Notify
    GOVUK_NOTIFY_API_KEY: str = ""
    GOVUK_NOTIFY_TEST_API_KEY: str = ""
    GOVUK_NOTIFY_BASE_URL: str = "https://api.notifications.service.gov.uk"
    GOVUK_NOTIFY_TIMEOUT_SECONDS: float = 20.0
    GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION: str = ""
    GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION_PDF_AND_SUMMARY: str = ""
    GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION_SUMMARY_ONLY: str = ""
    CATH_SERVICE_URL: str = "https://www.court-tribunal-hearings.service.gov.uk"

    @field_validator("CATH_SERVICE_URL", "GOVUK_NOTIFY_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    # CORS
    CORS_ORIGINS: str = '["http://localhost:8080"]'

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            return json.loads(self.CORS_ORIGINS)
        except json.JSONDecodeError:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def notify_api_key(self) -> str:
        """Test key in debug mode when one is configured."""
        if self.DEBUG and self.GOVUK_NOTIFY_TEST_API_KEY:
            return self.GOVUK_NOTIFY_TEST_API_KEY
        return self.GOVUK_NOTIFY_API_KEY

    @property
    def template_id_pdf_and_summary(self) -> str:
        return (
            self.GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION_PDF_AND_SUMMARY
            or self.GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION
        )

    @property
    def template_id_summary_only(self) -> str:
        return (
            self.GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION_SUMMARY_ONLY
            or self.GOVUK_NOTIFY_TEMPLATE_ID_SUBSCRIPTION
        )


# Create settings instance
settings = Settings()
