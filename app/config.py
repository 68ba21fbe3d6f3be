"""Application configuration using Pydantic Settings."""

import os
from datetime import timedelta
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_KEY = "pili-jobs-dev-secret-key-change-me"
# Only these environments may sign with DEV_SECRET_KEY
DEV_KEY_ENVIRONMENTS = frozenset({"development", "test"})


def _is_test_environment() -> bool:
    """Check if we're running in a test environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "pytest" in os.environ.get("_", "")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = (
        "sqlite+aiosqlite:///:memory:" if _is_test_environment() else "sqlite+aiosqlite:///./pili_jobs.db"
    )

    # Signing
    SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Sessions
    SESSION_COOKIE_NAME: str = "session"
    SESSION_DURATION_DAYS: int = 7
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # SMS gateway
    SMS_GATEWAY_URL: str = Field(
        default="https://api.textbee.dev",
        description="Base URL of the SMS gateway",
    )
    SMS_DEVICE_ID: str = ""
    SMS_API_KEY: str = ""
    SMS_TIMEOUT_SECONDS: float = 10.0

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # Application
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def require_secret_outside_development(self) -> "Settings":
        if not self.SECRET_KEY and self.ENVIRONMENT not in DEV_KEY_ENVIRONMENTS:
            raise ValueError(
                f"SECRET_KEY must be set when ENVIRONMENT is {self.ENVIRONMENT!r}"
            )
        return self

    @property
    def signing_key(self) -> str:
        """Secret used by the token codec.

        Falls back to the development key only in development and test.
        """
        if self.SECRET_KEY:
            return self.SECRET_KEY
        if self.ENVIRONMENT not in DEV_KEY_ENVIRONMENTS:
            raise RuntimeError("SECRET_KEY is required outside development")
        return DEV_SECRET_KEY

    @property
    def session_duration(self) -> timedelta:
        return timedelta(days=self.SESSION_DURATION_DAYS)

    @property
    def sms_configured(self) -> bool:
        """True when every gateway credential is present."""
        return bool(self.SMS_GATEWAY_URL and self.SMS_DEVICE_ID and self.SMS_API_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


settings = Settings()
