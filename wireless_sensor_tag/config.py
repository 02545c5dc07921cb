"""Platform configuration for the Wireless Sensor Tag integration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml

from .const import (
    API_BASE_URL,
    DEFAULT_BEEP_DURATION,
    DEFAULT_QUERY_FREQUENCY_MS,
    DOMAIN,
    MIN_QUERY_FREQUENCY_MS,
)
from .projector import TemperatureUnit

_LOGGER = logging.getLogger(__name__)

CONF_NAME = "name"
CONF_USERNAME = "username"
CONF_PASSWORD = "password"
CONF_QUERY_FREQUENCY = "queryFrequency"
CONF_IGNORE_NAMES = "ignoreNames"
CONF_TEMPERATURE_UNIT = "temperatureUnit"
CONF_REAUTHENTICATE = "reauthenticateEachCycle"
CONF_BASE_URL = "baseUrl"
CONF_BEEP_DURATION = "beepDuration"

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_NAME, default=DOMAIN): str,
        vol.Required(CONF_USERNAME): vol.All(str, vol.Length(min=1)),
        vol.Required(CONF_PASSWORD): str,
        vol.Optional(CONF_QUERY_FREQUENCY): vol.Any(None, vol.Coerce(int)),
        vol.Optional(CONF_IGNORE_NAMES, default=list): [str],
        vol.Optional(
            CONF_TEMPERATURE_UNIT, default=TemperatureUnit.CELSIUS.value
        ): vol.All(vol.Lower, vol.In([unit.value for unit in TemperatureUnit])),
        vol.Optional(CONF_REAUTHENTICATE, default=False): bool,
        vol.Optional(CONF_BASE_URL, default=API_BASE_URL): str,
        vol.Optional(CONF_BEEP_DURATION, default=DEFAULT_BEEP_DURATION): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass(frozen=True, slots=True)
class PlatformConfig:
    """Validated platform configuration."""

    username: str
    password: str
    query_frequency_ms: int = DEFAULT_QUERY_FREQUENCY_MS
    ignore_names: tuple[str, ...] = ()
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    reauthenticate_each_cycle: bool = False
    base_url: str = API_BASE_URL
    beep_duration: int = DEFAULT_BEEP_DURATION
    name: str = DOMAIN

    @property
    def query_interval(self) -> timedelta:
        """Return the poll interval as a ``timedelta``."""

        return timedelta(milliseconds=self.query_frequency_ms)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> PlatformConfig:
        """Validate raw host configuration and build the config object."""

        validated = CONFIG_SCHEMA(dict(data))
        return cls(
            username=validated[CONF_USERNAME],
            password=validated[CONF_PASSWORD],
            query_frequency_ms=clamp_query_frequency(
                validated.get(CONF_QUERY_FREQUENCY)
            ),
            ignore_names=tuple(validated[CONF_IGNORE_NAMES]),
            temperature_unit=TemperatureUnit(validated[CONF_TEMPERATURE_UNIT]),
            reauthenticate_each_cycle=validated[CONF_REAUTHENTICATE],
            base_url=validated[CONF_BASE_URL],
            beep_duration=validated[CONF_BEEP_DURATION],
            name=validated[CONF_NAME],
        )


def clamp_query_frequency(value: int | None) -> int:
    """Replace a missing or too frequent poll interval with the default."""

    if value is None or value < MIN_QUERY_FREQUENCY_MS:
        _LOGGER.warning(
            "Invalid query frequency %s ms (minimum %d ms), using %d ms",
            value,
            MIN_QUERY_FREQUENCY_MS,
            DEFAULT_QUERY_FREQUENCY_MS,
        )
        return DEFAULT_QUERY_FREQUENCY_MS
    return value


def load_config(path: str | Path) -> PlatformConfig:
    """Read a YAML platform configuration file."""

    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise vol.Invalid(f"Configuration in {path} must be a mapping")
    return PlatformConfig.from_mapping(data)
