"""High-level async client for the Lightbug tracking API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pylightbug._api import devices as _devices_api
from pylightbug._api.login import login as _login
from pylightbug._redact import redact_for_log
from pylightbug._transport import HttpTransport
from pylightbug.config import LightbugConfig
from pylightbug.exceptions import LightbugError
from pylightbug.models.device import DeviceId
from pylightbug.models.token import AuthToken

_logger = logging.getLogger(__name__)


class LightbugClient:
    """Async client for the Lightbug API.

    Usage::

        async with LightbugClient(config) as client:
            await client.login()
            devices = await client.get_device_list()

    The bearer token is obtained once by :meth:`login` and reused for the
    lifetime of the client.
    """

    def __init__(
        self,
        config: LightbugConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._authed: HttpTransport | None = None
        self._token: AuthToken | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LightbugClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(
            self._http_session,
            self._config.base_url,
            timeout=self._config.request_timeout,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._authed = None

    @property
    def http_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise LightbugError("Client not initialized. Use 'async with LightbugClient(...) as client:'")
        return self._http_session

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> AuthToken:
        """Authenticate and keep the bearer token for subsequent calls."""
        transport = self._require_transport()
        self._token = await _login(transport, self._config.email, self._config.password)
        self._authed = transport.with_headers({"authorization": self._token.authorization})
        return self._token

    @property
    def token(self) -> AuthToken | None:
        return self._token

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise LightbugError("Client not initialized. Use 'async with LightbugClient(...) as client:'")
        return self._transport

    def _require_authed(self) -> HttpTransport:
        self._require_transport()
        if self._authed is None:
            raise LightbugError("Not logged in. Call 'await client.login()' first")
        return self._authed

    def _trace(self, label: str, payload: Any) -> None:
        if self._config.api_trace_enabled:
            _logger.debug("%s: %s", label, redact_for_log(payload))

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def get_device_list(self) -> list[dict[str, Any]]:
        """Raw device enumeration (``/v2/devices``)."""
        devices = await _devices_api.fetch_device_list(self._require_authed())
        self._trace("/v2/devices", devices)
        return devices

    async def get_device_status(self, device_id: DeviceId) -> dict[str, Any]:
        """Raw status object of one device."""
        status = await _devices_api.fetch_device_status(self._require_authed(), device_id)
        self._trace(f"status {device_id}", status)
        return status

    async def get_device_points(self, device_id: DeviceId) -> list[dict[str, Any]]:
        """Raw recent location points of one device."""
        points = await _devices_api.fetch_device_points(self._require_authed(), device_id)
        self._trace(f"points {device_id}", points)
        return points
