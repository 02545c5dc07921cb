"""Wireless Sensor Tag bridge for smart-home host platforms."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .api import WirelessTagClient, create_http_client
from .config import PlatformConfig
from .const import DOMAIN
from .coordinator import TagPollCoordinator
from .registry import AccessoryHost, DeviceRegistry, RegisteredDevice

__version__ = "0.3.0"

__all__ = [
    "DOMAIN",
    "WirelessTagRuntime",
    "async_setup_platform",
    "async_unload_platform",
]


@dataclass(slots=True)
class WirelessTagRuntime:
    """Objects created for one configured platform."""

    config: PlatformConfig
    client: WirelessTagClient
    coordinator: TagPollCoordinator

    @property
    def registry(self) -> DeviceRegistry:
        """Return the device registry owned by the coordinator."""

        return self.coordinator.registry


async def async_setup_platform(
    config: PlatformConfig | Mapping[str, Any],
    host: AccessoryHost,
    *,
    http_client: httpx.AsyncClient | None = None,
    cached_devices: Iterable[RegisteredDevice] = (),
) -> WirelessTagRuntime:
    """Set up the platform and start polling.

    ``cached_devices`` are accessories the host platform restored from its
    own cache; they are adopted so later polls update rather than re-add them.
    """

    if not isinstance(config, PlatformConfig):
        config = PlatformConfig.from_mapping(dict(config))

    client = WirelessTagClient(http_client or create_http_client(config.base_url))
    coordinator = TagPollCoordinator(
        client=client,
        config=config,
        host=host,
        registry=DeviceRegistry(cached_devices),
    )
    await coordinator.async_start()
    return WirelessTagRuntime(config=config, client=client, coordinator=coordinator)


async def async_unload_platform(runtime: WirelessTagRuntime) -> None:
    """Stop polling and close the HTTP session."""

    await runtime.coordinator.async_shutdown()
    await runtime.client.async_close()
