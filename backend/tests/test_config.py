"""
Tests for centralized configuration.
"""
import pytest
from app.core.config import Settings, get_settings, reload_settings


def test_settings_defaults(monkeypatch):
    """Test that settings have sensible defaults."""
    for name in ("MAX_DATASET_ROWS", "RATE_LIMIT_PER_MINUTE", "LOG_LEVEL", "CHART_PALETTE"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()

    assert settings.max_dataset_rows == 100000
    assert settings.max_dataset_columns == 1000
    assert settings.rate_limit_per_minute == 60
    assert settings.request_timeout_seconds == 30
    assert settings.log_level == "INFO"
    assert settings.chart_palette == "default"
    assert settings.session_ttl_seconds == 3600


def test_settings_from_env(monkeypatch):
    """Test loading settings from environment variables."""
    monkeypatch.setenv("MAX_DATASET_ROWS", "500")
    monkeypatch.setenv("CHART_PALETTE", "Vibrant")

    try:
        settings = reload_settings()

        assert settings.max_dataset_rows == 500
        assert settings.chart_palette == "vibrant"
    finally:
        monkeypatch.delenv("MAX_DATASET_ROWS")
        monkeypatch.delenv("CHART_PALETTE")
        reload_settings()


def test_settings_validation():
    """Test that settings validate input ranges."""
    with pytest.raises(ValueError):
        Settings(max_dataset_rows=0)

    with pytest.raises(ValueError):
        Settings(log_level="INVALID")

    with pytest.raises(ValueError):
        Settings(chart_palette="neon")


def test_settings_properties():
    """Test computed properties."""
    settings = Settings(allowed_origins="http://a.test, ,http://b.test")
    assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


def test_settings_singleton():
    """Test that get_settings returns singleton."""
    assert get_settings() is get_settings()
