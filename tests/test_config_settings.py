"""
Tests for utilkit/config/settings.py

Settings are read from environment variables; monkeypatch keeps each test's
environment isolated, and the autouse fixture in conftest resets the cached
singleton.
"""

import pytest

from utilkit.config.settings import (
    FetchSettings,
    LoggingSettings,
    Settings,
    get_settings,
    reset_settings,
)


def test_fetch_settings_defaults(monkeypatch):
    """Test defaults when no environment variables are set."""
    monkeypatch.delenv("UTILKIT_FETCH_TIMEOUT_MS", raising=False)
    monkeypatch.delenv("UTILKIT_FETCH_DELAY_MS", raising=False)
    monkeypatch.delenv("UTILKIT_USER_AGENT", raising=False)

    settings = FetchSettings.from_env()

    assert settings.timeout_ms == 8000
    assert settings.delay_ms == 100
    assert settings.user_agent == "utilkit/1.0"


def test_fetch_settings_from_env(monkeypatch):
    """Test that environment variables override the defaults."""
    monkeypatch.setenv("UTILKIT_FETCH_TIMEOUT_MS", "2500")
    monkeypatch.setenv("UTILKIT_FETCH_DELAY_MS", "0")
    monkeypatch.setenv("UTILKIT_USER_AGENT", "tests/0.1")

    settings = FetchSettings.from_env()

    assert settings.timeout_ms == 2500
    assert settings.delay_ms == 0
    assert settings.user_agent == "tests/0.1"


def test_fetch_settings_rejects_non_integer_timeout(monkeypatch):
    """Test that a malformed timeout fails fast with a clear message."""
    monkeypatch.setenv("UTILKIT_FETCH_TIMEOUT_MS", "soon")

    with pytest.raises(ValueError, match="UTILKIT_FETCH_TIMEOUT_MS must be an integer"):
        FetchSettings.from_env()


def test_fetch_settings_validates_ranges():
    """Test that non-positive timeouts and negative delays are rejected."""
    with pytest.raises(ValueError, match="timeout_ms must be positive"):
        FetchSettings(timeout_ms=0)

    with pytest.raises(ValueError, match="delay_ms must be non-negative"):
        FetchSettings(delay_ms=-1)


def test_logging_settings_rejects_unknown_level():
    """Test that an unknown level name is rejected."""
    with pytest.raises(ValueError, match="UTILKIT_LOG_LEVEL"):
        LoggingSettings(level="CHATTY")


def test_logging_settings_upper_cases_env(monkeypatch):
    """Test that the level name is normalized to upper case."""
    monkeypatch.setenv("UTILKIT_LOG_LEVEL", "debug")

    assert LoggingSettings.from_env().level == "DEBUG"


def test_get_settings_is_cached_until_reset(monkeypatch):
    """Test the singleton behavior of get_settings()."""
    monkeypatch.setenv("UTILKIT_FETCH_DELAY_MS", "5")
    first = get_settings()

    monkeypatch.setenv("UTILKIT_FETCH_DELAY_MS", "7")
    assert get_settings() is first
    assert get_settings().fetch.delay_ms == 5

    reset_settings()
    assert get_settings().fetch.delay_ms == 7


def test_settings_defaults_without_env():
    """Test that a directly constructed Settings carries default subsystems."""
    settings = Settings()

    assert settings.fetch.timeout_ms == 8000
    assert settings.logging.level == "WARNING"
