"""Tests for configuration module."""

from qt_joins.config import Settings, get_settings


def test_settings_defaults(monkeypatch):
    """Test that settings have sensible defaults."""
    monkeypatch.delenv("QT_JOINS_FLOAT_TOLERANCE", raising=False)
    settings = Settings()
    assert settings.float_tolerance == 1e-6
    assert settings.max_differences == 10
    assert settings.dialect == "duckdb"
    assert settings.database == ":memory:"
    assert settings.log_level == "WARNING"


def test_environment_override(monkeypatch):
    """Test QT_JOINS_ prefixed variables override defaults."""
    monkeypatch.setenv("QT_JOINS_FLOAT_TOLERANCE", "0.01")
    monkeypatch.setenv("QT_JOINS_FIXTURES_PATH", "/data/fixtures")
    settings = Settings()
    assert settings.float_tolerance == 0.01
    assert settings.fixtures_path == "/data/fixtures"


def test_get_settings_is_cached():
    """Test get_settings returns one shared instance."""
    get_settings.cache_clear()
    assert get_settings() is get_settings()
