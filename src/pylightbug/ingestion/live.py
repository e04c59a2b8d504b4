"""Live status + GPS ingestion for a single tracker.

:class:`LiveDataFetcher` turns one serial into one :class:`LiveRecord`:

1. resolve the serial to the internal device id,
2. fetch and normalize the status object,
3. fetch the recent points in a separate failure scope,
4. pick the newest point and normalize it into a :class:`GpsFix`.

A failure in step 3 or 4 only drops the GPS part.  A miss in step 1 or a
failure in step 2 drops the whole tracker for this cycle (``None``).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pylightbug.exceptions import LightbugError
from pylightbug.identity import DeviceIdentityResolver
from pylightbug.ingestion.normalize import select_latest_point
from pylightbug.models.device import DeviceId
from pylightbug.models.live import LiveRecord
from pylightbug.models.status import DeviceStatusPayload
from pylightbug.models.telemetry import GpsFix, LocationPoint

_logger = logging.getLogger(__name__)


class LiveDataSource(Protocol):
    """The two per-device reads the fetcher needs (see :class:`LightbugClient`)."""

    async def get_device_status(self, device_id: DeviceId) -> dict[str, Any]: ...

    async def get_device_points(self, device_id: DeviceId) -> list[dict[str, Any]]: ...


def latest_gps_fix(points: list[dict[str, Any]], *, serial: str = "") -> GpsFix | None:
    """Normalize the newest valid entry of *points*, or ``None``."""
    latest = select_latest_point(points)
    if latest is None:
        _logger.warning("No GPS points with a usable timestamp for %s (%d received)", serial, len(points))
        return None

    fix = GpsFix.from_point(LocationPoint.model_validate(latest))
    if fix is None:
        _logger.warning("Latest point for %s is missing coordinates or timestamp: %s", serial, latest)
    return fix


class LiveDataFetcher:
    """Fetch and normalize live data for trackers, one serial at a time."""

    def __init__(self, source: LiveDataSource, resolver: DeviceIdentityResolver) -> None:
        self._source = source
        self._resolver = resolver

    @property
    def resolver(self) -> DeviceIdentityResolver:
        return self._resolver

    async def _fetch_gps(self, serial: str, device_id: DeviceId) -> GpsFix | None:
        try:
            points = await self._source.get_device_points(device_id)
            _logger.debug("Received %d points for %s", len(points), serial)
            fix = latest_gps_fix(points, serial=serial)
        except LightbugError as exc:
            _logger.error("Error fetching points for %s: %s", serial, exc)
            return None
        except Exception:
            _logger.exception("Unexpected error reading points for %s", serial)
            return None

        if fix is not None:
            _logger.debug("Latest GPS for %s: %s", serial, fix)
        return fix

    async def fetch_live(self, serial: str) -> LiveRecord | None:
        """Return the merged status + GPS record for *serial*, or ``None``.

        ``None`` means "nothing to persist for this tracker this cycle":
        either the serial is unknown upstream or the status read failed.
        """
        try:
            _logger.debug("Fetching status + telemetry for %s", serial)

            identity = await self._resolver.resolve_identity(serial)
            if identity is None:
                _logger.error("No device id for serial %s; skipping", serial)
                return None

            raw_status = await self._source.get_device_status(identity.internal_id)
            status = DeviceStatusPayload.from_api(raw_status)
            _logger.debug("Status for %s: %s", serial, status.model_dump(exclude={"raw"}))

            gps = await self._fetch_gps(identity.serial, identity.internal_id)

            return LiveRecord.from_status(identity.serial, identity.internal_id, status, gps)
        except LightbugError as exc:
            _logger.error("Error fetching data for %s: %s", serial, exc)
            return None
        except Exception:
            _logger.exception("Unexpected error fetching data for %s", serial)
            return None
