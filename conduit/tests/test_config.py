"""
Tests for environment-based configuration.
"""

import pytest
from pydantic import ValidationError

from conduit.config import DEFAULT_TIMEOUT, DEFAULT_TOKEN_LIFETIME, Settings
from conduit.services.http_executor import HttpExecutor, get_executor


class TestSettingsFromEnv:
    """Settings.from_env reads CONDUIT_* variables."""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.database_url == "sqlite:///./conduit.db"
        assert settings.request_timeout == DEFAULT_TIMEOUT
        assert settings.follow_redirects is True
        assert settings.log_level == "INFO"
        assert settings.cors_origins == ["*"]
        assert settings.jwt_secret is None
        assert settings.jwt_algorithm == "HS256"
        assert settings.jwt_expires_in == DEFAULT_TOKEN_LIFETIME

    def test_values_from_environment(self):
        settings = Settings.from_env({
            "CONDUIT_DATABASE_URL": "sqlite:///./other.db",
            "CONDUIT_REQUEST_TIMEOUT": "2.5",
            "CONDUIT_FOLLOW_REDIRECTS": "false",
            "CONDUIT_LOG_LEVEL": "debug",
            "CONDUIT_CORS_ORIGINS": "http://localhost:3000, https://app.example.com",
            "CONDUIT_JWT_SECRET": "s3cret",
            "CONDUIT_JWT_EXPIRES_IN": "3600",
            "UNRELATED": "ignored",
        })

        assert settings.database_url == "sqlite:///./other.db"
        assert settings.request_timeout == 2.5
        assert settings.follow_redirects is False
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["http://localhost:3000", "https://app.example.com"]
        assert settings.jwt_secret == "s3cret"
        assert settings.jwt_expires_in == 3600

    @pytest.mark.parametrize("timeout", ["0", "-1", "soon"])
    def test_invalid_timeout_rejected(self, timeout):
        with pytest.raises(ValidationError):
            Settings.from_env({"CONDUIT_REQUEST_TIMEOUT": timeout})

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings.from_env({"CONDUIT_LOG_LEVEL": "chatty"})


def test_executor_uses_configured_timeout():
    executor = get_executor()

    assert isinstance(executor, HttpExecutor)
    assert executor.timeout > 0
    assert executor.transport is None
