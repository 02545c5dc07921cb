"""Derive stable local identifiers for remote tags."""

from __future__ import annotations

import uuid

from .const import DOMAIN

_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_DNS, f"{DOMAIN}.mytaglist.com")


class IdentityMapper:
    """Map persistent tag ids to host-facing identifiers.

    Identifiers are name-based UUIDs so a restarted process derives the same
    value for a tag the host platform has already rehydrated.
    """

    def __init__(self) -> None:
        """Start with an empty memo table."""

        self._identifiers: dict[str, str] = {}

    def resolve(self, persistent_id: str) -> str:
        """Return the local identifier for ``persistent_id``."""

        identifier = self._identifiers.get(persistent_id)
        if identifier is None:
            identifier = str(uuid.uuid5(_NAMESPACE, persistent_id))
            self._identifiers[persistent_id] = identifier
        return identifier

    def __len__(self) -> int:
        return len(self._identifiers)
