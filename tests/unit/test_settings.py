"""
Unit tests for application settings.

Tests verify defaults, environment overrides and conversion into the
domain's token and mail settings.
"""

from datetime import timedelta

import pytest

from src.config.settings import Settings, get_settings
from src.domain.exceptions import ConfigurationError
from src.domain.tokens import TokenIssuer


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of settings under test."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


class TestDefaults:
    """Tests for default values."""

    def test_token_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.token_ttl_hours == 12
        assert settings.token_secret == ""

    def test_mail_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.mail_send_attempts == 3
        assert settings.mail_backend == "console"

    def test_persistence_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.repository_backend == "memory"
        assert settings.password_scheme == "legacy"


class TestEnvironment:
    """Tests for environment variable loading."""

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN_SECRET", "from-environment-secret-0123456789")
        monkeypatch.setenv("TOKEN_ISSUER", "issuer-from-env")
        monkeypatch.setenv("MAIL_SEND_ATTEMPTS", "5")

        settings = Settings(_env_file=None)

        assert settings.token_secret == "from-environment-secret-0123456789"
        assert settings.token_issuer == "issuer-from-env"
        assert settings.mail_send_attempts == 5

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestConversion:
    """Tests for building domain settings."""

    def test_token_settings(self) -> None:
        settings = Settings(
            _env_file=None,
            token_secret="s" * 40,
            token_issuer="iss",
            token_audience="aud",
            token_ttl_hours=2,
        )

        token_settings = settings.token_settings()

        assert token_settings.secret == "s" * 40
        assert token_settings.issuer == "iss"
        assert token_settings.audience == "aud"
        assert token_settings.validity == timedelta(hours=2)

    def test_missing_secret_is_fatal_for_token_components(self) -> None:
        settings = Settings(_env_file=None, token_secret="")
        with pytest.raises(ConfigurationError):
            TokenIssuer(settings.token_settings())

    def test_mail_settings(self) -> None:
        settings = Settings(
            _env_file=None,
            official_email_address="lms@example.com",
            account_activate_api="https://lms.example.com/activate",
            password_reset_api="https://lms.example.com/reset",
            mail_send_attempts=4,
        )

        mail_settings = settings.mail_settings()

        assert mail_settings.official_email_address == "lms@example.com"
        assert mail_settings.activation_url == "https://lms.example.com/activate"
        assert mail_settings.password_reset_url == "https://lms.example.com/reset"
        assert mail_settings.max_attempts == 4
