"""Project tag record fields onto registered device characteristics."""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any

from .const import BATTERY_LOW_THRESHOLD
from .models import RemoteTagRecord
from .registry import (
    AccessoryHost,
    BatteryStatus,
    Capability,
    Characteristic,
    DeviceRegistry,
    RegisteredDevice,
)

_LOGGER = logging.getLogger(__name__)


class TemperatureUnit(str, Enum):
    """Unit used for the temperature characteristic."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    def convert(self, celsius: float) -> float:
        """Convert a Celsius reading into this unit."""

        if self is TemperatureUnit.FAHRENHEIT:
            return celsius * 9 / 5 + 32
        return celsius


def battery_status(remaining: float) -> BatteryStatus:
    """Return the low battery status for a remaining fraction."""

    if remaining < BATTERY_LOW_THRESHOLD:
        return BatteryStatus.LOW
    return BatteryStatus.NORMAL


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""

    return math.floor(value + 0.5)


class DeviceStateProjector:
    """Apply a tag record to a registered device."""

    def __init__(
        self,
        *,
        host: AccessoryHost,
        registry: DeviceRegistry,
        temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS,
    ) -> None:
        """Bind the host platform and the registry holding command addresses."""

        self._host = host
        self._registry = registry
        self._temperature_unit = temperature_unit

    @property
    def temperature_unit(self) -> TemperatureUnit:
        """Return the configured temperature unit."""

        return self._temperature_unit

    async def async_update(
        self, device: RegisteredDevice, record: RemoteTagRecord
    ) -> None:
        """Push the values of ``record`` to the characteristics of ``device``."""

        if record.name and record.name != device.name:
            _LOGGER.info(
                "Tag %s renamed from %r to %r",
                record.persistent_id,
                device.name,
                record.name,
            )
            device.name = record.name
            await self._async_set(device, Characteristic.NAME, record.name)

        await self._async_set(
            device,
            Characteristic.CURRENT_TEMPERATURE,
            self._temperature_unit.convert(record.temperature),
        )
        if device.has_humidity and record.cap is not None:
            await self._async_set(
                device,
                Characteristic.CURRENT_RELATIVE_HUMIDITY,
                round_half_up(record.cap),
            )
        if Capability.BATTERY in device.capabilities:
            await self._async_set(
                device,
                Characteristic.STATUS_LOW_BATTERY,
                battery_status(record.battery_remaining),
            )
        if Capability.OCCUPANCY in device.capabilities:
            await self._async_set(
                device, Characteristic.OCCUPANCY_DETECTED, record.occupied
            )

        device.firmware_revision = record.firmware_revision
        await self._async_set(
            device, Characteristic.FIRMWARE_REVISION, device.firmware_revision
        )

        self._registry.set_slave_id(device.local_id, record.slave_id)

    async def _async_set(
        self, device: RegisteredDevice, characteristic: Characteristic, value: Any
    ) -> None:
        """Record ``value`` locally and forward it to the host."""

        device.characteristics[characteristic] = value
        await self._host.async_update_characteristic(device, characteristic, value)
