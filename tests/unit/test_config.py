"""Environment-driven configuration."""

import pytest

from app.config import AppConfig, load_config
from app.domain.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "PLANTCARE_ENV",
        "PLANTCARE_SECRET_KEY",
        "PLANTCARE_SEASONAL_MULTIPLIERS",
        "PLANTCARE_DEFAULT_MAX_SNOOZES",
        "PLANTCARE_WEATHER_ENABLED",
        "PLANTCARE_LATITUDE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()
    assert config.default_max_snoozes == 3
    assert config.seasonal_multipliers == {"winter": 0.7, "spring": 1.2, "summer": 1.3, "fall": 0.9}
    assert config.weather_enabled is True
    assert config.default_latitude is None


def test_seasonal_multipliers_merge_over_defaults(monkeypatch):
    monkeypatch.setenv("PLANTCARE_SEASONAL_MULTIPLIERS", '{"Summer": 1.5}')
    config = AppConfig()
    assert config.seasonal_multipliers["summer"] == 1.5
    assert config.seasonal_multipliers["winter"] == 0.7


def test_unknown_season_rejected(monkeypatch):
    monkeypatch.setenv("PLANTCARE_SEASONAL_MULTIPLIERS", '{"monsoon": 1.1}')
    with pytest.raises(ConfigurationError):
        AppConfig()


def test_multiplier_out_of_range(monkeypatch):
    monkeypatch.setenv("PLANTCARE_SEASONAL_MULTIPLIERS", '{"winter": 5}')
    with pytest.raises(ConfigurationError):
        AppConfig()


def test_multipliers_must_be_json_object(monkeypatch):
    monkeypatch.setenv("PLANTCARE_SEASONAL_MULTIPLIERS", "[1, 2]")
    with pytest.raises(ValueError):
        AppConfig()


@pytest.mark.parametrize("value", ["-1", "11"])
def test_max_snoozes_bounds(monkeypatch, value):
    monkeypatch.setenv("PLANTCARE_DEFAULT_MAX_SNOOZES", value)
    with pytest.raises(ConfigurationError):
        AppConfig()


def test_weather_flag_and_location(monkeypatch):
    monkeypatch.setenv("PLANTCARE_WEATHER_ENABLED", "false")
    monkeypatch.setenv("PLANTCARE_LATITUDE", "52.37")
    config = AppConfig()
    assert config.weather_enabled is False
    assert config.default_latitude == 52.37


def test_production_requires_secret(monkeypatch):
    monkeypatch.setenv("PLANTCARE_ENV", "production")
    with pytest.raises(RuntimeError):
        AppConfig()

    monkeypatch.setenv("PLANTCARE_SECRET_KEY", "a-real-secret")
    assert AppConfig().as_flask_config()["SECRET_KEY"] == "a-real-secret"


def test_overrides_match_fields_case_insensitively():
    config = AppConfig().with_overrides({"debug": True, "DEFAULT_MAX_SNOOZES": 5})
    assert config.DEBUG is True
    assert config.default_max_snoozes == 5


@pytest.mark.parametrize(
    "overrides",
    [
        {"default_max_snoozes": 11},
        {"seasonal_multipliers": {"summer": 5.0}},
        {"seasonal_multipliers": {"monsoon": 1.0}},
        {"no_such_setting": 1},
    ],
)
def test_overrides_are_validated(overrides):
    with pytest.raises(ConfigurationError):
        AppConfig().with_overrides(overrides)


def test_create_app_rejects_invalid_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("PLANTCARE_SECRET_KEY", "test-secret")
    from app import create_app

    with pytest.raises(ConfigurationError):
        create_app(
            {
                "database_path": str(tmp_path / "test.db"),
                "weather_enabled": False,
                "log_file": None,
                "seasonal_multipliers": {"winter": 0.01},
            }
        )
