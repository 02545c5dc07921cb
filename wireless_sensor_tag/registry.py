"""Registered accessory model and the registry that owns it."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from .const import MANUFACTURER

_LOGGER = logging.getLogger(__name__)


class Capability(str, Enum):
    """Services an accessory exposes to the host platform."""

    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    BATTERY = "battery"
    OCCUPANCY = "occupancy"


class Characteristic(str, Enum):
    """Characteristic kinds pushed to the host platform."""

    NAME = "name"
    CURRENT_TEMPERATURE = "current_temperature"
    CURRENT_RELATIVE_HUMIDITY = "current_relative_humidity"
    STATUS_LOW_BATTERY = "status_low_battery"
    OCCUPANCY_DETECTED = "occupancy_detected"
    FIRMWARE_REVISION = "firmware_revision"


class BatteryStatus(str, Enum):
    """Values of the low battery characteristic."""

    NORMAL = "normal"
    LOW = "low"


DEFAULT_CAPABILITIES = frozenset(
    {Capability.TEMPERATURE, Capability.BATTERY, Capability.OCCUPANCY}
)


@dataclass
class RegisteredDevice:
    """Host-side accessory for one tag."""

    local_id: str
    name: str
    serial_number: str
    model: str
    tag_type: int = 0
    manufacturer: str = MANUFACTURER
    firmware_revision: str = ""
    capabilities: frozenset[Capability] = DEFAULT_CAPABILITIES
    characteristics: dict[Characteristic, Any] = field(default_factory=dict)

    @property
    def has_humidity(self) -> bool:
        """Return True when a humidity service is attached."""

        return Capability.HUMIDITY in self.capabilities

    def as_descriptor(self) -> dict[str, Any]:
        """Serialise identity metadata for registration or persistence."""

        return {
            "local_id": self.local_id,
            "name": self.name,
            "serial_number": self.serial_number,
            "model": self.model,
            "tag_type": self.tag_type,
            "manufacturer": self.manufacturer,
            "firmware_revision": self.firmware_revision,
            "capabilities": sorted(capability.value for capability in self.capabilities),
        }

    @classmethod
    def from_descriptor(cls, data: dict[str, Any]) -> RegisteredDevice:
        """Hydrate a device persisted by the host platform."""

        return cls(
            local_id=data["local_id"],
            name=data.get("name", ""),
            serial_number=data["serial_number"],
            model=data.get("model", ""),
            tag_type=data.get("tag_type", 0),
            manufacturer=data.get("manufacturer", MANUFACTURER),
            firmware_revision=data.get("firmware_revision", ""),
            capabilities=(
                frozenset(Capability(value) for value in data["capabilities"])
                if "capabilities" in data
                else DEFAULT_CAPABILITIES
            ),
        )


class AccessoryHost(Protocol):
    """Registration interface provided by the smart-home host platform."""

    async def async_register_device(self, device: RegisteredDevice) -> None:
        """Expose a new accessory."""

    async def async_update_characteristic(
        self,
        device: RegisteredDevice,
        characteristic: Characteristic,
        value: Any,
    ) -> None:
        """Push a characteristic value for ``device``."""

    async def async_unregister_devices(
        self, devices: Sequence[RegisteredDevice]
    ) -> None:
        """Withdraw accessories from the host."""


class DeviceRegistry:
    """Own the registered devices and their command addresses."""

    def __init__(self, devices: Iterable[RegisteredDevice] = ()) -> None:
        """Optionally seed the registry with rehydrated devices."""

        self._devices: dict[str, RegisteredDevice] = {}
        self._slave_ids: dict[str, int] = {}
        for device in devices:
            self.restore(device)

    def __contains__(self, local_id: object) -> bool:
        return local_id in self._devices

    def __len__(self) -> int:
        return len(self._devices)

    @property
    def devices(self) -> dict[str, RegisteredDevice]:
        """Return a mapping of local identifier to device."""

        return dict(self._devices)

    def get(self, local_id: str) -> RegisteredDevice | None:
        """Return the device registered under ``local_id``."""

        return self._devices.get(local_id)

    def add(self, device: RegisteredDevice) -> RegisteredDevice:
        """Store a newly created device."""

        if device.local_id in self._devices:
            raise ValueError(f"Device {device.local_id} is already registered")
        self._devices[device.local_id] = device
        return device

    def restore(self, device: RegisteredDevice) -> RegisteredDevice:
        """Adopt a device the host platform rehydrated from its cache."""

        existing = self._devices.get(device.local_id)
        if existing is not None:
            return existing
        _LOGGER.debug("Restored cached accessory %s (%s)", device.name, device.local_id)
        self._devices[device.local_id] = device
        return device

    def set_slave_id(self, local_id: str, slave_id: int) -> None:
        """Remember the command address of the tag behind ``local_id``."""

        self._slave_ids[local_id] = slave_id

    def get_slave_id(self, local_id: str) -> int | None:
        """Return the cached command address for ``local_id``."""

        return self._slave_ids.get(local_id)

    async def async_remove(
        self, local_ids: Iterable[str], host: AccessoryHost
    ) -> list[RegisteredDevice]:
        """Remove devices on operator request and unregister them."""

        removed: list[RegisteredDevice] = []
        for local_id in local_ids:
            device = self._devices.pop(local_id, None)
            self._slave_ids.pop(local_id, None)
            if device is not None:
                removed.append(device)
        if removed:
            await host.async_unregister_devices(removed)
        return removed


class LoggingAccessoryHost:
    """Host implementation that only logs what it is asked to do."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _LOGGER

    async def async_register_device(self, device: RegisteredDevice) -> None:
        self._logger.info(
            "Registered %s (%s, serial %s)",
            device.name,
            device.model,
            device.serial_number,
        )

    async def async_update_characteristic(
        self,
        device: RegisteredDevice,
        characteristic: Characteristic,
        value: Any,
    ) -> None:
        self._logger.info("%s: %s = %s", device.name, characteristic.value, value)

    async def async_unregister_devices(
        self, devices: Sequence[RegisteredDevice]
    ) -> None:
        self._logger.info(
            "Unregistered %s", ", ".join(device.name for device in devices)
        )
