"""Session client for the Wireless Sensor Tag cloud service."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .const import (
    API_BASE_URL,
    BEEP_ENDPOINT,
    DEFAULT_BEEP_DURATION,
    DEFAULT_TIMEOUT,
    SIGNIN_ENDPOINT,
    TAG_LIST_ENDPOINT,
)
from .models import RemoteTagRecord, TagListResponse

_LOGGER = logging.getLogger(__name__)


class WirelessTagError(RuntimeError):
    """Base error raised by the Wireless Sensor Tag integration."""


class AuthenticationFailure(WirelessTagError):
    """Raised when the service rejects or cannot process a sign-in."""


class FetchFailure(WirelessTagError):
    """Raised when the tag list cannot be retrieved."""


class CommandFailure(WirelessTagError):
    """Raised when a command such as beep is not accepted."""


def create_http_client(base_url: str = API_BASE_URL) -> httpx.AsyncClient:
    """Return an httpx async client with a cookie jar for the session."""

    return httpx.AsyncClient(
        base_url=base_url,
        timeout=DEFAULT_TIMEOUT.total_seconds(),
        headers={"Content-Type": "application/json; charset=utf-8"},
    )


class WirelessTagClient:
    """Issue authenticated requests against the tag manager service.

    The session cookie issued by ``Signin`` lives in the cookie jar of the
    wrapped ``httpx.AsyncClient`` and is reused by every later request.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Bind the HTTP client used for every request."""

        self._client = client

    async def async_authenticate(self, username: str, password: str) -> None:
        """Sign in and keep the resulting session cookie."""

        try:
            response = await self._client.post(
                SIGNIN_ENDPOINT,
                json={"email": username, "password": password},
            )
            response.raise_for_status()
        except httpx.HTTPError as err:
            raise AuthenticationFailure(
                f"Sign-in failed for {username}: {err}"
            ) from err
        _LOGGER.debug("Signed in to tag manager as %s", username)

    async def async_fetch_payloads(self) -> list[Any]:
        """Return the raw tag entries of the current tag list.

        An empty list is a valid snapshot; transport errors raise
        ``FetchFailure`` instead.
        """

        try:
            response = await self._client.post(TAG_LIST_ENDPOINT, json={})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as err:
            raise FetchFailure(f"Unable to fetch tag list: {err}") from err

        try:
            envelope = TagListResponse.model_validate(payload)
        except ValidationError as err:
            raise FetchFailure(f"Unexpected tag list payload: {err}") from err
        return envelope.d

    async def async_fetch_snapshot(self) -> list[RemoteTagRecord]:
        """Return the current tag list as validated records."""

        payloads = await self.async_fetch_payloads()
        try:
            return [RemoteTagRecord.model_validate(item) for item in payloads]
        except ValidationError as err:
            raise FetchFailure(f"Invalid tag record in snapshot: {err}") from err

    async def async_send_beep(
        self, slave_id: int, duration: int = DEFAULT_BEEP_DURATION
    ) -> None:
        """Ask the tag addressed by ``slave_id`` to beep."""

        try:
            response = await self._client.post(
                BEEP_ENDPOINT,
                json={"id": slave_id, "beepDuration": duration},
            )
            response.raise_for_status()
        except httpx.HTTPError as err:
            raise CommandFailure(f"Beep failed for tag {slave_id}: {err}") from err
        _LOGGER.debug("Beep sent to tag %s for %s ms", slave_id, duration)

    async def async_close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()
