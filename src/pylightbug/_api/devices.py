"""Device endpoints.

Endpoints:
  - GET /v2/devices                    device enumeration, ``{"data": [...]}``
  - GET /api/devices/{device_id}       flat status object
  - GET /api/devices/{device_id}/points  array of location entries
"""

from __future__ import annotations

import logging
from typing import Any

from pylightbug._constants import DEVICE_LIST_ENDPOINT, DEVICE_POINTS_ENDPOINT, DEVICE_STATUS_ENDPOINT
from pylightbug._transport import Transport
from pylightbug.ingestion.normalize import unwrap_data
from pylightbug.models.device import DeviceId

_logger = logging.getLogger(__name__)


def _as_list(payload: Any, endpoint: str) -> list[dict[str, Any]]:
    items = unwrap_data(payload)
    if not isinstance(items, list):
        _logger.warning("%s returned %s instead of a list", endpoint, type(payload).__name__)
        return []
    return [item for item in items if isinstance(item, dict)]


async def fetch_device_list(transport: Transport) -> list[dict[str, Any]]:
    """Fetch the raw device enumeration."""
    response = await transport.request_json("GET", DEVICE_LIST_ENDPOINT)
    return _as_list(response, DEVICE_LIST_ENDPOINT)


async def fetch_device_status(transport: Transport, device_id: DeviceId) -> dict[str, Any]:
    """Fetch the raw status object of one device (``{}`` if it is not an object)."""
    endpoint = DEVICE_STATUS_ENDPOINT.format(device_id=device_id)
    response = await transport.request_json("GET", endpoint)
    if not isinstance(response, dict):
        _logger.warning("%s returned %s instead of an object", endpoint, type(response).__name__)
        return {}
    return response


async def fetch_device_points(transport: Transport, device_id: DeviceId) -> list[dict[str, Any]]:
    """Fetch the raw recent location points of one device."""
    endpoint = DEVICE_POINTS_ENDPOINT.format(device_id=device_id)
    response = await transport.request_json("GET", endpoint)
    if response is None:
        return []
    return _as_list(response, endpoint)
