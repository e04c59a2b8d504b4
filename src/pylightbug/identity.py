"""Serial → internal device id resolution.

The Lightbug API addresses devices by an internal id, while the tracker
roster lists the serial printed on the hardware.  :class:`DeviceIdentityResolver`
loads the full enumeration once, on first use, and answers every later
lookup from that snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from pylightbug.models.device import DeviceId, DeviceIdentity, DeviceSummary

_logger = logging.getLogger(__name__)

DeviceListFetcher = Callable[[], Awaitable[list[dict[str, Any]]]]


def build_identity_map(devices: list[dict[str, Any]]) -> dict[str, DeviceId]:
    """Map serial → id, skipping entries that lack either."""
    identities: dict[str, DeviceId] = {}
    for raw in devices:
        try:
            device = DeviceSummary.model_validate(raw)
        except ValidationError:
            _logger.warning("Skipping unparseable device entry: %s", raw)
            continue
        if device.serial is None or device.id is None:
            _logger.warning("Skipping device with missing serial or id: %s", raw)
            continue
        if device.serial in identities and identities[device.serial] != device.id:
            _logger.warning(
                "Serial %s listed twice (ids %s and %s); keeping the last",
                device.serial,
                identities[device.serial],
                device.id,
            )
        identities[device.serial] = device.id
    return identities


class DeviceIdentityResolver:
    """Lazily loaded, process-lifetime serial → id cache.

    * The enumeration is fetched on the first :meth:`resolve` call only.
      Concurrent first callers share one fetch.
    * Once loaded the map never changes.  A serial missing from it stays
      missing until the process restarts; :meth:`resolve` returns ``None``
      for it instead of raising.
    * If the enumeration fetch fails, the error propagates and the resolver
      stays unloaded, so the next call fetches again.
    """

    def __init__(self, fetch_devices: DeviceListFetcher) -> None:
        self._fetch_devices = fetch_devices
        self._identities: Mapping[str, DeviceId] | None = None
        self._load_lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._identities is not None

    def __len__(self) -> int:
        return len(self._identities) if self._identities is not None else 0

    def identities(self) -> Mapping[str, DeviceId]:
        """Read-only view of the loaded map (empty before the first load)."""
        return self._identities if self._identities is not None else MappingProxyType({})

    async def _ensure_loaded(self) -> Mapping[str, DeviceId]:
        if self._identities is not None:
            return self._identities
        async with self._load_lock:
            if self._identities is None:
                _logger.info("Loading device list to build serial → id map")
                devices = await self._fetch_devices()
                self._identities = MappingProxyType(build_identity_map(devices))
                _logger.info("Device map built with %d entries", len(self._identities))
        return self._identities

    async def resolve(self, serial: str) -> DeviceId | None:
        """Return the internal id for *serial*, or ``None`` on a miss."""
        identities = await self._ensure_loaded()
        device_id = identities.get(str(serial).strip())
        if device_id is None:
            _logger.warning("No device id found for serial %s", serial)
        return device_id

    async def resolve_identity(self, serial: str) -> DeviceIdentity | None:
        device_id = await self.resolve(serial)
        if device_id is None:
            return None
        return DeviceIdentity(serial=str(serial).strip(), internal_id=device_id)
