"""
Unit tests for configuration defaults and environment overrides
"""
import pytest
from pydantic import ValidationError

from poimap.config.settings import DeclutterSettings, Environment, FetchSettings, Settings, ViewportSettings


def test_defaults():
    settings = Settings()

    assert (settings.default_lng, settings.default_lat) == (-73.9855, 40.7580)
    assert settings.default_zoom == 13
    assert settings.focus_zoom == 16
    assert settings.fetch.result_limit == 500
    assert settings.fetch.timeout_seconds == 5.0
    assert settings.viewport.debounce_seconds == 0.75
    assert settings.viewport.edge_fraction == 0.10
    assert settings.declutter.min_delta == 0.0005
    assert settings.declutter.cap == 100


def test_env_prefix_overrides(monkeypatch):
    monkeypatch.setenv("FETCH_RESULT_LIMIT", "250")
    monkeypatch.setenv("DECLUTTER_CAP", "40")

    assert FetchSettings().result_limit == 250
    assert DeclutterSettings().cap == 40


def test_debounce_bounds_are_enforced():
    with pytest.raises(ValidationError):
        ViewportSettings(debounce_seconds=2.0)


def test_environment_and_cors_parsing():
    settings = Settings(environment="PRODUCTION", cors_origins="https://a.example, https://b.example")

    assert settings.environment is Environment.PRODUCTION
    assert settings.is_production()
    assert settings.get_cors_config()["allow_origins"] == ["https://a.example", "https://b.example"]
