"""Reconcile fetched tag snapshots against the device registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from .api import WirelessTagError
from .const import MANUFACTURER
from .identity import IdentityMapper
from .models import RemoteTagRecord
from .projector import DeviceStateProjector
from .registry import (
    DEFAULT_CAPABILITIES,
    AccessoryHost,
    Capability,
    DeviceRegistry,
    RegisteredDevice,
)

_LOGGER = logging.getLogger(__name__)


class RecordReconciliationFailure(WirelessTagError):
    """Raised when a single tag record cannot be added or updated."""

    def __init__(self, tag_id: str | None, message: str) -> None:
        super().__init__(message)
        self.tag_id = tag_id


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of one reconciliation pass."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    failed: list[RecordReconciliationFailure] = field(default_factory=list)


def matches_ignore_rule(name: str, ignore_names: Iterable[str]) -> bool:
    """Return True when ``name`` contains any configured substring."""

    return any(rule and rule in name for rule in ignore_names)


class ReconciliationEngine:
    """Classify snapshot entries and drive the add and update paths."""

    def __init__(
        self,
        *,
        registry: DeviceRegistry,
        identity: IdentityMapper,
        projector: DeviceStateProjector,
        host: AccessoryHost,
        ignore_names: Sequence[str] = (),
    ) -> None:
        """Wire the engine to its collaborators."""

        self._registry = registry
        self._identity = identity
        self._projector = projector
        self._host = host
        self._ignore_names = tuple(ignore_names)

    async def async_reconcile(
        self, snapshot: Iterable[Any]
    ) -> ReconcileResult:
        """Apply every entry of ``snapshot`` in order.

        A failure on one entry is logged and recorded in the result; the
        remaining entries are still processed.
        """

        result = ReconcileResult()
        for entry in snapshot:
            try:
                await self._async_process(entry, result)
            except RecordReconciliationFailure as failure:
                _LOGGER.warning("Skipping tag %s: %s", failure.tag_id, failure)
                result.failed.append(failure)
        _LOGGER.debug(
            "Reconciled snapshot: %d added, %d updated, %d ignored, %d failed",
            len(result.added),
            len(result.updated),
            len(result.ignored),
            len(result.failed),
        )
        return result

    async def _async_process(
        self, entry: Any, result: ReconcileResult
    ) -> None:
        """Classify a single entry and apply it."""

        record = _coerce_record(entry)
        try:
            local_id = self._identity.resolve(record.persistent_id)
            if matches_ignore_rule(record.name, self._ignore_names):
                _LOGGER.debug("Ignoring tag %s (%s)", record.name, record.persistent_id)
                result.ignored.append(local_id)
                return

            device = self._registry.get(local_id)
            if device is None:
                await self.async_add(local_id, record)
                result.added.append(local_id)
            else:
                await self._projector.async_update(device, record)
                result.updated.append(local_id)
        except Exception as err:
            raise RecordReconciliationFailure(
                record.persistent_id, f"{type(err).__name__}: {err}"
            ) from err

    async def async_add(
        self, local_id: str, record: RemoteTagRecord
    ) -> RegisteredDevice:
        """Create, register and populate the device for a new tag."""

        capabilities = set(DEFAULT_CAPABILITIES)
        if record.has_humidity:
            capabilities.add(Capability.HUMIDITY)

        device = RegisteredDevice(
            local_id=local_id,
            name=record.name,
            serial_number=record.persistent_id,
            model=record.model_name,
            tag_type=record.tag_type,
            manufacturer=MANUFACTURER,
            firmware_revision=record.firmware_revision,
            capabilities=frozenset(capabilities),
        )
        _LOGGER.info("Adding tag %s (%s) as %s", record.name, device.model, local_id)
        # Only registered devices enter the registry; a rejected
        # registration is retried on the next poll.
        await self._host.async_register_device(device)
        self._registry.add(device)
        await self._projector.async_update(device, record)
        return device


def _coerce_record(entry: Any) -> RemoteTagRecord:
    """Validate a raw snapshot entry into a ``RemoteTagRecord``.

    Entries that are not JSON objects fail here with no tag id.
    """

    if isinstance(entry, RemoteTagRecord):
        return entry
    try:
        return RemoteTagRecord.model_validate(entry)
    except ValidationError as err:
        tag_id = entry.get("uuid") if isinstance(entry, Mapping) else None
        raise RecordReconciliationFailure(
            tag_id, f"Malformed tag record: {err.error_count()} validation error(s)"
        ) from err
