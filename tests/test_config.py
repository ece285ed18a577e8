"""Tests for settings and logging configuration."""

import logging

import structlog

from sheets_gateway.config import Settings, get_settings
from sheets_gateway.observability import configure_logging


def test_defaults():
    """Test default settings."""
    settings = Settings(_env_file=None)

    assert settings.APP_NAME == "google-sheets-manager"
    assert settings.REQUEST_TIMEOUT_SECONDS == 30.0
    assert settings.MAX_CONCURRENT_CALLS == 8
    assert settings.SHEETS_API_BASE_URL == "https://sheets.googleapis.com/v4"
    assert settings.oauth_configured is False


def test_environment_override(monkeypatch):
    """Environment variables override defaults."""
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    monkeypatch.setenv("MAX_CONCURRENT_CALLS", "3")

    settings = Settings(_env_file=None)

    assert settings.GOOGLE_API_KEY == "from-env"
    assert settings.MAX_CONCURRENT_CALLS == 3


def test_oauth_configured():
    """OAuth counts as configured only with all three values."""
    settings = Settings(_env_file=None, client_id="a", client_secret="b", refresh_token="c")

    assert settings.oauth_configured is True


def test_get_settings_is_cached():
    """Test settings cache."""
    assert get_settings() is get_settings()


def test_configure_logging_writes_to_stderr(capsys):
    """Logs never touch stdout."""
    configure_logging("DEBUG", json_logs=True)
    try:
        structlog.get_logger("test").info("hello_event", answer=42)
    finally:
        structlog.reset_defaults()

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello_event" in captured.err
    assert '"answer": 42' in captured.err


def test_configure_logging_unknown_level_falls_back():
    """An unknown level falls back to INFO."""
    configure_logging("NOT_A_LEVEL")
    structlog.reset_defaults()

    assert logging.getLogger().level == logging.INFO
