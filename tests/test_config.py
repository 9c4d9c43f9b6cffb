"""
Tests for environment-driven Settings.
"""
import logging
import pytest

from openversion.config import Settings

CONFIG_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "HOST",
    "PORT",
    "DATABASE_URL",
    "COMPUTE_MAX_ATTEMPTS",
    "API_AUTH_ENABLED",
    "API_TOKEN",
    "API_AUTH_ENFORCE_IN_DEVELOPMENT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings()

    assert settings.environment == "development"
    assert settings.is_development
    assert not settings.is_production
    assert settings.log_level == "INFO"
    assert settings.port == 8000
    assert settings.database_url == "sqlite+aiosqlite:///./openversion.db"
    assert settings.compute_max_attempts == 3
    assert settings.api_auth_enabled is True
    assert settings.api_token == ""
    assert settings.api_auth_enforce_in_development is False


def test_overrides(clean_env):
    clean_env.setenv("PORT", "9000")
    clean_env.setenv("COMPUTE_MAX_ATTEMPTS", "5")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("API_AUTH_ENFORCE_IN_DEVELOPMENT", "yes")

    settings = Settings()

    assert settings.port == 9000
    assert settings.compute_max_attempts == 5
    assert settings.log_level == "DEBUG"
    assert settings.api_auth_enforce_in_development is True


@pytest.mark.parametrize("value", ["0", "-1"])
def test_max_attempts_must_be_positive(clean_env, value):
    clean_env.setenv("COMPUTE_MAX_ATTEMPTS", value)

    with pytest.raises(ValueError, match="COMPUTE_MAX_ATTEMPTS"):
        Settings()


def test_invalid_integer_fails_fast(clean_env):
    clean_env.setenv("PORT", "eighty")

    with pytest.raises(ValueError, match="PORT"):
        Settings()


def test_invalid_log_level(clean_env):
    clean_env.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError, match="LOG_LEVEL"):
        Settings()


def test_production_requires_token(clean_env):
    clean_env.setenv("ENVIRONMENT", "production")

    with pytest.raises(ValueError, match="API_TOKEN"):
        Settings()


def test_production_with_guard_disabled(clean_env):
    clean_env.setenv("ENVIRONMENT", "production")
    clean_env.setenv("API_AUTH_ENABLED", "false")

    settings = Settings()

    assert settings.is_production
    assert settings.api_auth_enabled is False


def test_unenforced_token_in_development_warns(clean_env, caplog):
    clean_env.setenv("API_TOKEN", "sk_local")

    with caplog.at_level(logging.WARNING, logger="openversion.config"):
        Settings()

    assert "not enforced in development" in caplog.text
