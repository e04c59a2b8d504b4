from __future__ import annotations

from typing import Any

import pytest

from pylightbug.exceptions import LightbugPersistenceError, LightbugTransportError
from pylightbug.identity import DeviceIdentityResolver
from pylightbug.ingestion.live import LiveDataFetcher
from pylightbug.models.live import LiveRecord
from pylightbug.models.status import StatusRecord
from pylightbug.models.telemetry import GpsFix, TelemetryRecord
from pylightbug.poller import PollerState, TrackerPoller
from pylightbug.sink.memory import MemorySink


def _live(serial: str, *, battery: int = 80, gps: bool = True, motion: str = "idle") -> LiveRecord:
    return LiveRecord(
        serial=serial,
        device_id=f"dev-{serial}",
        battery=battery,
        temperature=20,
        motion=motion,
        mode="armed",
        last_connection="2024-01-01T00:00:00.000Z",
        gps=GpsFix(timestamp="2024-01-01T00:00:00.000Z", lat=1.5, lon=-2.5) if gps else None,
    )


class _FakeFetcher:
    def __init__(self, records: dict[str, LiveRecord | Exception | None]) -> None:
        self.records = records
        self.calls: list[str] = []

    async def fetch_live(self, serial: str) -> LiveRecord | None:
        self.calls.append(serial)
        result = self.records.get(serial)
        if isinstance(result, Exception):
            raise result
        return result


class _FailingRosterSink(MemorySink):
    def __init__(self, failures: int) -> None:
        super().__init__(["T-1"])
        self.failures = failures
        self.roster_calls = 0

    async def list_active_tracker_serials(self) -> list[str]:
        self.roster_calls += 1
        if self.roster_calls <= self.failures:
            raise LightbugPersistenceError("Roster query failed", table="my_horses")
        return await super().list_active_tracker_serials()


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_cycle_writes_status_and_telemetry() -> None:
    sink = MemorySink(["T-1", "T-2"])
    fetcher = _FakeFetcher({"T-1": _live("T-1"), "T-2": _live("T-2", gps=False)})

    report = await TrackerPoller(fetcher, sink).run_cycle()

    assert fetcher.calls == ["T-1", "T-2"]
    assert [row["serial"] for row in sink.status_rows] == ["T-1", "T-2"]
    assert len(sink.telemetry_rows) == 1
    assert sink.telemetry_rows[0]["latitude"] == 1.5
    assert sink.telemetry_rows[0]["deviceID"] == "dev-T-1"
    assert report.trackers == 2
    assert report.status_written == 2
    assert report.telemetry_written == 1


@pytest.mark.asyncio
async def test_unchanged_status_suppressed_but_telemetry_always_written() -> None:
    sink = MemorySink(["T-1"])
    poller = TrackerPoller(_FakeFetcher({"T-1": _live("T-1")}), sink)

    await poller.run_cycle()
    report = await poller.run_cycle()

    assert len(sink.status_rows) == 1
    assert len(sink.telemetry_rows) == 2
    assert report.status_suppressed == 1
    assert report.telemetry_written == 1


@pytest.mark.asyncio
async def test_changed_status_is_written_again() -> None:
    sink = MemorySink(["T-1"])
    fetcher = _FakeFetcher({"T-1": _live("T-1", motion="idle")})
    poller = TrackerPoller(fetcher, sink)

    await poller.run_cycle()
    fetcher.records["T-1"] = _live("T-1", motion="moving")
    await poller.run_cycle()

    assert [row["motion"] for row in sink.status_rows] == ["idle", "moving"]


@pytest.mark.asyncio
async def test_identity_miss_skips_tracker_and_continues() -> None:
    async def devices() -> list[dict[str, Any]]:
        return [{"serial": "T-1", "id": 1}]

    class _Source:
        async def get_device_status(self, device_id: Any) -> dict[str, Any]:
            return {"batteryPct": 90}

        async def get_device_points(self, device_id: Any) -> list[dict[str, Any]]:
            return [{"timestamp": "2024-01-01T00:00:00Z", "location": {"lat": 1, "lng": 2}}]

    sink = MemorySink(["T-9", "T-1"])
    fetcher = LiveDataFetcher(_Source(), DeviceIdentityResolver(devices))

    report = await TrackerPoller(fetcher, sink).run_cycle()

    assert report.skipped == 1
    assert [row["serial"] for row in sink.status_rows] == ["T-1"]
    assert [row["serial"] for row in sink.telemetry_rows] == ["T-1"]


@pytest.mark.asyncio
async def test_tracker_error_does_not_abort_the_rest_of_the_roster() -> None:
    sink = MemorySink(["T-1", "T-2", "T-3"])
    fetcher = _FakeFetcher({"T-1": _live("T-1"), "T-2": RuntimeError("boom"), "T-3": _live("T-3")})

    report = await TrackerPoller(fetcher, sink).run_cycle()

    assert fetcher.calls == ["T-1", "T-2", "T-3"]
    assert report.failed == ["T-2"]
    assert [row["serial"] for row in sink.status_rows] == ["T-1", "T-3"]


@pytest.mark.asyncio
async def test_insert_failure_is_not_counted_and_cycle_continues() -> None:
    class _FlakySink(MemorySink):
        async def insert_status(self, record: StatusRecord) -> bool:
            return False

        async def insert_telemetry(self, record: TelemetryRecord) -> bool:
            return record.serial != "T-1"

    sink = _FlakySink(["T-1", "T-2"])
    report = await TrackerPoller(_FakeFetcher({"T-1": _live("T-1"), "T-2": _live("T-2")}), sink).run_cycle()

    assert report.status_written == 0
    assert report.telemetry_written == 1
    assert report.failed == []


@pytest.mark.asyncio
async def test_roster_failure_propagates_from_cycle() -> None:
    with pytest.raises(LightbugPersistenceError):
        await TrackerPoller(_FakeFetcher({}), _FailingRosterSink(failures=1)).run_cycle()


@pytest.mark.asyncio
async def test_run_reschedules_after_failed_cycle() -> None:
    sink = _FailingRosterSink(failures=1)
    sleep = _RecordingSleep()
    poller = TrackerPoller(_FakeFetcher({"T-1": _live("T-1")}), sink, interval=15.0, sleep=sleep)

    await poller.run(max_cycles=2)

    assert poller.cycles == 2
    assert sink.roster_calls == 2
    assert sleep.delays == [15.0]
    assert len(sink.status_rows) == 1
    assert poller.state is PollerState.IDLE


@pytest.mark.asyncio
async def test_state_is_running_during_cycle() -> None:
    observed: list[PollerState] = []

    class _ObservingFetcher(_FakeFetcher):
        async def fetch_live(self, serial: str) -> LiveRecord | None:
            observed.append(poller.state)
            return None

    poller = TrackerPoller(_ObservingFetcher({}), MemorySink(["T-1"]), sleep=_RecordingSleep())
    assert poller.state is PollerState.IDLE

    await poller.run(max_cycles=1)

    assert observed == [PollerState.RUNNING]
    assert poller.state is PollerState.IDLE


@pytest.mark.asyncio
async def test_fetcher_transport_error_only_skips_tracker() -> None:
    class _Source:
        async def get_device_status(self, device_id: Any) -> dict[str, Any]:
            if device_id == 1:
                raise LightbugTransportError("HTTP 502", status_code=502)
            return {"batteryPct": 10}

        async def get_device_points(self, device_id: Any) -> list[dict[str, Any]]:
            return []

    async def devices() -> list[dict[str, Any]]:
        return [{"serial": "A", "id": 1}, {"serial": "B", "id": 2}]

    sink = MemorySink(["A", "B"])
    report = await TrackerPoller(LiveDataFetcher(_Source(), DeviceIdentityResolver(devices)), sink).run_cycle()

    assert report.skipped == 1
    assert [row["serial"] for row in sink.status_rows] == ["B"]
    assert sink.telemetry_rows == []
