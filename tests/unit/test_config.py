"""Unit tests for configuration management."""

import pytest
from pydantic import ValidationError

from quill.config import Settings


def test_settings_from_environment(test_settings: Settings):
    """Test that settings load from environment variables."""
    assert test_settings.google_api_key.get_secret_value() == "google-test-key"
    assert test_settings.google_cx == "test-cx"
    assert test_settings.generation_api_key.get_secret_value() == "gsk-test-key"
    assert test_settings.log_level == "DEBUG"


def test_trailing_slash_stripped(test_settings: Settings):
    """Test that base URLs are normalised without a trailing slash."""
    assert test_settings.api_base_url == "http://store.test/api"


def test_default_values(monkeypatch):
    """Test that default values match the pipeline constants."""
    for name in ("API_BASE_URL", "API_URL", "GENERATION_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "http://localhost:5000/api"
    assert settings.generation_max_tokens == 4000
    assert settings.generation_temperature == 0.7
    assert settings.direct_timeout_seconds == 15.0
    assert settings.render_timeout_seconds == 30.0
    assert settings.render_settle_seconds == 2.0
    assert settings.inter_reference_delay == 1.0
    assert settings.inter_article_delay == 3.0
    assert settings.warm_up_delay == 2.0
    assert settings.blocked_reference_domains == ["youtube.com", "facebook.com"]
    assert settings.skip_already_enhanced is False


def test_legacy_env_names_accepted(monkeypatch):
    """Test that API_URL and GROQ_API_KEY are accepted as aliases."""
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("GENERATION_API_KEY", raising=False)
    monkeypatch.setenv("API_URL", "http://localhost:5000/api")
    monkeypatch.setenv("GROQ_API_KEY", "gsk-legacy")

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "http://localhost:5000/api"
    assert settings.generation_api_key.get_secret_value() == "gsk-legacy"


def test_blocked_domains_from_comma_separated_string(monkeypatch):
    """Test parsing blocked domains from a comma-separated env var."""
    monkeypatch.setenv("BLOCKED_REFERENCE_DOMAINS", "youtube.com, tiktok.com,")

    settings = Settings(_env_file=None)

    assert settings.blocked_reference_domains == ["youtube.com", "tiktok.com"]


def test_log_level_validation_invalid(monkeypatch):
    """Test validation error for an unknown log level."""
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert "Invalid log_level" in str(exc_info.value)


def test_temperature_out_of_range(monkeypatch):
    """Test validation error for a temperature above 2."""
    monkeypatch.setenv("GENERATION_TEMPERATURE", "3.5")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_missing_enhancement_settings(monkeypatch):
    """Test that required enhancement credentials are reported by env name."""
    for name in ("GOOGLE_API_KEY", "GOOGLE_CX", "GENERATION_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.missing_enhancement_settings() == [
        "GOOGLE_API_KEY",
        "GOOGLE_CX",
        "GENERATION_API_KEY",
    ]


def test_no_missing_settings_when_configured(test_settings: Settings):
    assert test_settings.missing_enhancement_settings() == []
