"""Poll scheduling and command handling for the Wireless Sensor Tag integration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from datetime import timedelta
from enum import Enum
from typing import Any

from .api import AuthenticationFailure, CommandFailure, FetchFailure, WirelessTagClient
from .config import PlatformConfig
from .identity import IdentityMapper
from .projector import DeviceStateProjector
from .reconcile import ReconcileResult, ReconciliationEngine
from .registry import AccessoryHost, DeviceRegistry


class PollState(str, Enum):
    """Lifecycle states of the poll coordinator."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    POLLING = "polling"


class TagPollCoordinator:
    """Authenticate, then fetch and reconcile the tag list on an interval."""

    def __init__(
        self,
        *,
        client: WirelessTagClient,
        config: PlatformConfig,
        host: AccessoryHost,
        registry: DeviceRegistry | None = None,
        identity: IdentityMapper | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialise the coordinator with integration dependencies."""

        self._client = client
        self._config = config
        self._host = host
        self.registry = registry if registry is not None else DeviceRegistry()
        self.identity = identity if identity is not None else IdentityMapper()
        self._loop = loop
        self.logger = logger or logging.getLogger(__name__)

        self.projector = DeviceStateProjector(
            host=host,
            registry=self.registry,
            temperature_unit=config.temperature_unit,
        )
        self.engine = ReconciliationEngine(
            registry=self.registry,
            identity=self.identity,
            projector=self.projector,
            host=host,
            ignore_names=config.ignore_names,
        )

        self.state = PollState.UNAUTHENTICATED
        self.update_interval: timedelta = config.query_interval
        self.last_result: ReconcileResult | None = None
        self._cycle_lock = asyncio.Lock()
        self._refresh_task: asyncio.TimerHandle | None = None
        self._pending_tasks: set[asyncio.Task[Any]] = set()

    @property
    def _refresh_interval_seconds(self) -> float:
        """Expose the coordinator refresh interval as seconds."""

        return self.update_interval.total_seconds()

    @property
    def is_refreshing(self) -> bool:
        """Return True while a fetch and reconcile cycle is running."""

        return self._cycle_lock.locked()

    async def async_start(self) -> bool:
        """Authenticate, run the first cycle and start polling.

        Returns False when authentication fails; the coordinator then stays
        unauthenticated without a timer until started again.
        """

        if self.state is not PollState.UNAUTHENTICATED:
            return self.state is PollState.POLLING

        self.state = PollState.AUTHENTICATING
        if not await self._async_authenticate():
            self.state = PollState.UNAUTHENTICATED
            return False

        async with self._cycle_lock:
            await self._async_cycle(reauthenticate=False)

        self.state = PollState.POLLING
        self.async_schedule_refresh(self.async_refresh)
        return True

    async def async_refresh(self) -> ReconcileResult | None:
        """Run one fetch and reconcile cycle unless one is already running."""

        if self._cycle_lock.locked():
            self.logger.debug("Previous tag refresh still running, skipping tick")
            return None

        async with self._cycle_lock:
            return await self._async_cycle(
                reauthenticate=self._config.reauthenticate_each_cycle
            )

    async def _async_cycle(self, *, reauthenticate: bool) -> ReconcileResult | None:
        """Fetch the tag list and reconcile it; failures abort this cycle only."""

        self.logger.debug("Starting update of wireless tags from tag manager")
        if reauthenticate and not await self._async_authenticate():
            return None

        try:
            payloads = await self._client.async_fetch_payloads()
        except FetchFailure as err:
            self.logger.error("Failed getting tag list: %s", err)
            return None

        result = await self.engine.async_reconcile(payloads)
        self.last_result = result
        self.logger.debug("Updated wireless tag data (%d tags)", len(payloads))
        return result

    async def _async_authenticate(self) -> bool:
        """Sign in with the configured credentials."""

        try:
            await self._client.async_authenticate(
                self._config.username, self._config.password
            )
        except AuthenticationFailure as err:
            self.logger.error("Failed authenticating to tag manager: %s", err)
            return False
        return True

    def async_schedule_refresh(
        self, callback: Callable[[], Awaitable[Any] | None]
    ) -> asyncio.TimerHandle:
        """Schedule recurring refresh callbacks."""

        loop = self._loop or asyncio.get_running_loop()

        def _wrapper() -> None:
            task = callback()
            if isinstance(task, Coroutine):
                task_obj = loop.create_task(task)
                self._pending_tasks.add(task_obj)
                task_obj.add_done_callback(self._pending_tasks.discard)
            self._refresh_task = loop.call_later(
                self._refresh_interval_seconds, _wrapper
            )

        if self._refresh_task is not None:
            self._refresh_task.cancel()
        self._refresh_task = loop.call_later(self._refresh_interval_seconds, _wrapper)
        return self._refresh_task

    def cancel_refresh(self) -> None:
        """Cancel any scheduled refresh callbacks."""

        if self._refresh_task is not None:
            self._refresh_task.cancel()
            self._refresh_task = None

    async def async_shutdown(self) -> None:
        """Stop the timer and cancel cycles started by it."""

        self.cancel_refresh()
        pending = list(self._pending_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def async_identify(self, local_id: str) -> bool:
        """Beep the tag behind ``local_id`` in response to an identify request."""

        slave_id = self.registry.get_slave_id(local_id)
        if slave_id is None:
            self.logger.warning("Cannot identify %s: tag has not been seen yet", local_id)
            return False

        try:
            await self._client.async_send_beep(slave_id, self._config.beep_duration)
        except CommandFailure as err:
            self.logger.error("Identify failed for %s: %s", local_id, err)
            return False
        return True
