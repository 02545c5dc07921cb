"""Pytest configuration for the Wireless Sensor Tag tests."""

from __future__ import annotations

import asyncio
import inspect
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

root_path = Path(__file__).resolve().parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))

from wireless_sensor_tag.registry import Characteristic, RegisteredDevice  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register markers used throughout the test suite."""

    config.addinivalue_line(
        "markers", "asyncio: mark coroutine tests to execute via asyncio loop"
    )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute coroutine tests within a dedicated event loop."""

    test_function = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_function):
        return None

    parameters = inspect.signature(test_function).parameters
    kwargs = {
        name: value for name, value in pyfuncitem.funcargs.items() if name in parameters
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_function(**kwargs))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


class RecordingHost:
    """Host platform double recording registrations and updates."""

    def __init__(self) -> None:
        """Initialise empty call logs."""

        self.registered: list[RegisteredDevice] = []
        self.updates: list[tuple[str, Characteristic, Any]] = []
        self.unregistered: list[RegisteredDevice] = []

    async def async_register_device(self, device: RegisteredDevice) -> None:
        """Record a device registration."""

        self.registered.append(device)

    async def async_update_characteristic(
        self, device: RegisteredDevice, characteristic: Characteristic, value: Any
    ) -> None:
        """Record a characteristic update."""

        self.updates.append((device.local_id, characteristic, value))

    async def async_unregister_devices(
        self, devices: Sequence[RegisteredDevice]
    ) -> None:
        """Record devices withdrawn from the host."""

        self.unregistered.extend(devices)

    def values_for(
        self, local_id: str, characteristic: Characteristic
    ) -> list[Any]:
        """Return every value pushed for one characteristic of one device."""

        return [
            value
            for device_id, kind, value in self.updates
            if device_id == local_id and kind is characteristic
        ]


@pytest.fixture
def host() -> RecordingHost:
    """Return a fresh recording host."""

    return RecordingHost()


@pytest.fixture
def make_tag() -> Callable[..., dict[str, Any]]:
    """Return a factory building raw ``GetTagList2`` entries."""

    def _make_tag(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "uuid": "0b4c6ab1-1f0e-4b1d-9a43-5b8e6f6b2c01",
            "name": "Living Room",
            "slaveId": 1,
            "tagType": 13,
            "temperature": 21.6,
            "batteryRemaining": 0.5,
            "alive": True,
            "OutOfRange": False,
            "rev": 15,
        }
        payload.update(overrides)
        return payload

    return _make_tag
