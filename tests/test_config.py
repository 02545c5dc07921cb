"""Tests for platform configuration parsing."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest
import voluptuous as vol

from wireless_sensor_tag.config import PlatformConfig, load_config
from wireless_sensor_tag.const import DEFAULT_QUERY_FREQUENCY_MS
from wireless_sensor_tag.projector import TemperatureUnit


def test_minimal_config_uses_defaults(caplog) -> None:
    """Only credentials are required; a missing frequency falls back."""

    with caplog.at_level(logging.WARNING):
        config = PlatformConfig.from_mapping(
            {"username": "user@example.com", "password": "secret"}
        )

    assert config.query_frequency_ms == DEFAULT_QUERY_FREQUENCY_MS
    assert config.ignore_names == ()
    assert config.temperature_unit is TemperatureUnit.CELSIUS
    assert config.reauthenticate_each_cycle is False
    assert "Invalid query frequency" in caplog.text


def test_frequency_below_minimum_is_clamped(caplog) -> None:
    """Too frequent polling is replaced by the safe default with a warning."""

    with caplog.at_level(logging.WARNING):
        config = PlatformConfig.from_mapping(
            {"username": "u", "password": "p", "queryFrequency": 1000}
        )

    assert config.query_frequency_ms == DEFAULT_QUERY_FREQUENCY_MS
    assert "1000" in caplog.text


def test_valid_frequency_is_kept() -> None:
    """Frequencies at or above the minimum are used as given."""

    config = PlatformConfig.from_mapping(
        {"username": "u", "password": "p", "queryFrequency": "60000"}
    )

    assert config.query_frequency_ms == 60000
    assert config.query_interval == timedelta(minutes=1)


def test_policies_and_ignore_rules_are_parsed() -> None:
    """Optional policies map onto the config object."""

    config = PlatformConfig.from_mapping(
        {
            "username": "u",
            "password": "p",
            "queryFrequency": 30000,
            "ignoreNames": ["Garage", "Freezer"],
            "temperatureUnit": "Fahrenheit",
            "reauthenticateEachCycle": True,
            "platform": "wireless-sensor-tag",
        }
    )

    assert config.ignore_names == ("Garage", "Freezer")
    assert config.temperature_unit is TemperatureUnit.FAHRENHEIT
    assert config.reauthenticate_each_cycle is True


def test_missing_credentials_are_rejected() -> None:
    """Configuration without a username is invalid."""

    with pytest.raises(vol.Invalid):
        PlatformConfig.from_mapping({"password": "p"})


def test_unknown_temperature_unit_is_rejected() -> None:
    """Only Celsius and Fahrenheit are supported."""

    with pytest.raises(vol.Invalid):
        PlatformConfig.from_mapping(
            {"username": "u", "password": "p", "temperatureUnit": "kelvin"}
        )


def test_load_config_reads_yaml(tmp_path) -> None:
    """YAML files are loaded into a platform config."""

    path = tmp_path / "platform.yaml"
    path.write_text(
        "username: user@example.com\n"
        "password: secret\n"
        "queryFrequency: 45000\n"
        "ignoreNames:\n"
        "  - Garage\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.username == "user@example.com"
    assert config.query_frequency_ms == 45000
    assert config.ignore_names == ("Garage",)


def test_load_config_rejects_non_mapping(tmp_path) -> None:
    """A YAML list is not a valid configuration."""

    path = tmp_path / "platform.yaml"
    path.write_text("- username\n", encoding="utf-8")

    with pytest.raises(vol.Invalid):
        load_config(path)
