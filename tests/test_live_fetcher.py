from __future__ import annotations

from typing import Any

import pytest

from pylightbug.exceptions import LightbugTransportError
from pylightbug.identity import DeviceIdentityResolver
from pylightbug.ingestion.live import LiveDataFetcher, latest_gps_fix

_DEVICES = [{"serial": "T-1", "id": 101}, {"serial": "T-2", "id": 102}]

_STATUS = {
    "id": 101,
    "batteryPct": 80,
    "temperature": 20,
    "motion": "idle",
    "currentMode": "armed",
    "lastConnection": "2024-01-01T00:00:00Z",
}


class _FakeSource:
    """Stands in for LightbugClient's per-device reads."""

    def __init__(
        self,
        *,
        statuses: dict[int, Any] | None = None,
        points: dict[int, Any] | None = None,
        status_error: Exception | None = None,
        points_error: Exception | None = None,
    ) -> None:
        self.statuses = statuses or {}
        self.points = points or {}
        self.status_error = status_error
        self.points_error = points_error
        self.status_calls: list[int] = []
        self.points_calls: list[int] = []

    async def get_device_list(self) -> list[dict[str, Any]]:
        return list(_DEVICES)

    async def get_device_status(self, device_id: int) -> dict[str, Any]:
        self.status_calls.append(device_id)
        if self.status_error is not None:
            raise self.status_error
        return self.statuses.get(device_id, {})

    async def get_device_points(self, device_id: int) -> list[dict[str, Any]]:
        self.points_calls.append(device_id)
        if self.points_error is not None:
            raise self.points_error
        return self.points.get(device_id, [])


def _fetcher(source: _FakeSource) -> LiveDataFetcher:
    return LiveDataFetcher(source, DeviceIdentityResolver(source.get_device_list))


@pytest.mark.asyncio
async def test_fetch_live_merges_status_and_latest_point() -> None:
    source = _FakeSource(
        statuses={101: _STATUS},
        points={
            101: [
                {"timestamp": "2024-01-01T00:00:00Z", "location": {"lat": 1.0, "lng": 1.0}},
                {"timestamp": "2024-01-01T00:02:00Z", "location": {"lat": 3.0, "lng": 3.0}, "course": 45},
                {"timestamp": "2024-01-01T00:01:00Z", "location": {"lat": 2.0, "lng": 2.0}},
            ]
        },
    )

    record = await _fetcher(source).fetch_live("T-1")

    assert record is not None
    assert record.serial == "T-1"
    assert record.device_id == 101
    assert record.battery == 80
    assert record.mode == "armed"
    assert record.gps is not None
    assert record.gps.lat == 3.0
    assert record.gps.heading == 45
    assert record.gps.timestamp == "2024-01-01T00:02:00.000Z"


@pytest.mark.asyncio
async def test_identity_miss_returns_none_without_fetching() -> None:
    source = _FakeSource(statuses={101: _STATUS})

    assert await _fetcher(source).fetch_live("T-9") is None
    assert source.status_calls == []
    assert source.points_calls == []


@pytest.mark.asyncio
async def test_status_transport_failure_returns_none() -> None:
    source = _FakeSource(status_error=LightbugTransportError("HTTP 500", status_code=500))

    assert await _fetcher(source).fetch_live("T-1") is None
    assert source.points_calls == []


@pytest.mark.asyncio
async def test_unexpected_error_returns_none() -> None:
    source = _FakeSource(status_error=RuntimeError("boom"))

    assert await _fetcher(source).fetch_live("T-1") is None


@pytest.mark.asyncio
async def test_points_failure_keeps_status() -> None:
    source = _FakeSource(
        statuses={101: _STATUS},
        points_error=LightbugTransportError("Request to GET /api/devices/101/points failed"),
    )

    record = await _fetcher(source).fetch_live("T-1")

    assert record is not None
    assert record.battery == 80
    assert record.temperature == 20
    assert record.motion == "idle"
    assert record.mode == "armed"
    assert record.gps is None


@pytest.mark.asyncio
async def test_unexpected_points_error_keeps_status() -> None:
    source = _FakeSource(statuses={101: _STATUS}, points_error=ValueError("bad points"))

    record = await _fetcher(source).fetch_live("T-1")

    assert record is not None
    assert record.gps is None


@pytest.mark.asyncio
async def test_empty_status_fields_become_none() -> None:
    source = _FakeSource(statuses={102: {"id": 102}})

    record = await _fetcher(source).fetch_live("T-2")

    assert record is not None
    assert record.battery is None
    assert record.temperature is None
    assert record.motion is None
    assert record.mode is None
    assert record.last_connection is None
    assert record.gps is None


@pytest.mark.asyncio
async def test_latest_point_without_coordinates_means_no_gps() -> None:
    source = _FakeSource(
        statuses={101: _STATUS},
        points={
            101: [
                {"timestamp": "2024-01-01T00:00:00Z", "location": {"lat": 1.0, "lng": 1.0}},
                {"timestamp": "2024-01-01T00:05:00Z", "location": {"lat": None, "lng": 2.0}},
            ]
        },
    )

    record = await _fetcher(source).fetch_live("T-1")

    assert record is not None
    assert record.gps is None


def test_latest_gps_fix_no_valid_timestamps() -> None:
    assert latest_gps_fix([{"location": {"lat": 1, "lng": 2}}, {"timestamp": ""}]) is None
    assert latest_gps_fix([]) is None


def test_latest_gps_fix_ignores_upstream_raw_key() -> None:
    fix = latest_gps_fix([{"timestamp": "2024-01-01T00:00:00Z", "location": {"lat": 1, "lng": 2}, "raw": 5}])

    assert fix is not None
    assert (fix.lat, fix.lon) == (1, 2)
