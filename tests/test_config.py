"""Tests for application settings."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from app.config import DEV_SECRET_KEY, Settings
from app.core.security import TokenCodec


@pytest.mark.parametrize("environment", ["production", "staging"])
def test_secret_key_required_outside_development(environment):
    with pytest.raises(ValidationError) as exc_info:
        Settings(ENVIRONMENT=environment, SECRET_KEY="")
    assert "SECRET_KEY must be set" in str(exc_info.value)


def test_production_uses_configured_secret():
    settings = Settings(ENVIRONMENT="production", SECRET_KEY="prod-secret")
    assert settings.signing_key == "prod-secret"


@pytest.mark.parametrize("environment", ["development", "test"])
def test_development_falls_back_to_dev_key(environment):
    settings = Settings(ENVIRONMENT=environment, SECRET_KEY="")
    assert settings.signing_key == DEV_SECRET_KEY


def test_signing_key_never_falls_back_in_production():
    # model_copy skips validation, so the property must refuse on its own
    settings = Settings(ENVIRONMENT="development", SECRET_KEY="").model_copy(
        update={"ENVIRONMENT": "production"}
    )
    with pytest.raises(RuntimeError):
        settings.signing_key


def test_dev_key_tokens_rejected_in_production():
    forged = TokenCodec(DEV_SECRET_KEY).create_access_token("admin-id", timedelta(minutes=5))
    settings = Settings(ENVIRONMENT="production", SECRET_KEY="prod-secret")

    assert TokenCodec(settings.signing_key).verify(forged) is None


def test_session_duration_and_cors():
    settings = Settings(
        SESSION_DURATION_DAYS=3,
        CORS_ORIGINS="http://a.example, http://b.example,",
    )
    assert settings.session_duration == timedelta(days=3)
    assert settings.cors_origins_list == ["http://a.example", "http://b.example"]
