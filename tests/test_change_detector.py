from __future__ import annotations

from typing import Any

import pytest

from pylightbug.models.status import StatusRecord
from pylightbug.sink.memory import MemorySink
from pylightbug.state.detector import ChangeDetector, DecisionReason
from pylightbug.state.policy import changed_fields, status_changed


def _status(**overrides: Any) -> StatusRecord:
    values: dict[str, Any] = {
        "serial": "T-1",
        "device_id": 101,
        "battery": 80,
        "temperature": 20,
        "motion": "idle",
        "mode": "armed",
        "last_connection": "2024-01-01T00:00:00.000Z",
    }
    values.update(overrides)
    return StatusRecord(**values)


class _FakeReader:
    def __init__(self, row: dict[str, Any] | None) -> None:
        self.row = row
        self.calls: list[str] = []

    async def get_last_status(self, serial: str) -> dict[str, Any] | None:
        self.calls.append(serial)
        return self.row


def test_status_changed_ignores_last_connection_and_device_id() -> None:
    previous = _status()
    current = _status(last_connection="2024-01-01T00:01:00.000Z", device_id=999)
    assert not status_changed(previous, current)


@pytest.mark.parametrize(
    ("field", "value"),
    [("battery", 79), ("temperature", 21), ("motion", "moving"), ("mode", "disarmed"), ("battery", None)],
)
def test_any_tracked_field_change_is_detected(field: str, value: Any) -> None:
    assert changed_fields(_status(), _status(**{field: value})) == (field,)


@pytest.mark.asyncio
async def test_bootstrap_persists() -> None:
    reader = _FakeReader(None)
    status = _status()

    decision = await ChangeDetector(reader).should_persist(status)

    assert decision.persist
    assert decision.reason is DecisionReason.BOOTSTRAP
    assert decision.row == status
    assert reader.calls == ["T-1"]


@pytest.mark.asyncio
async def test_only_last_connection_differs_suppresses_write() -> None:
    reader = _FakeReader(_status().to_row())

    decision = await ChangeDetector(reader).should_persist(_status(last_connection="2024-01-02T00:00:00.000Z"))

    assert not decision.persist
    assert decision.reason is DecisionReason.UNCHANGED
    assert decision.row is None


@pytest.mark.asyncio
async def test_motion_change_persists() -> None:
    reader = _FakeReader(_status(motion="idle").to_row())

    decision = await ChangeDetector(reader).should_persist(_status(motion="moving"))

    assert decision.persist
    assert decision.reason is DecisionReason.CHANGED
    assert decision.changed == ("motion",)


@pytest.mark.asyncio
async def test_stored_row_with_numeric_serial_and_float_values() -> None:
    row = {
        "id": 1,
        "created_at": "2024-01-01T00:00:00+00:00",
        "serial": 12345,
        "deviceId": "101",
        "battery": 80.0,
        "temperature": 20,
        "motion": "idle",
        "mode": "armed",
    }

    decision = await ChangeDetector(_FakeReader(row)).should_persist(_status(serial="12345"))

    assert not decision.persist


@pytest.mark.asyncio
async def test_second_call_after_persist_is_suppressed() -> None:
    sink = MemorySink()
    detector = ChangeDetector(sink)
    status = _status()

    first = await detector.should_persist(status)
    assert first.persist and first.row is not None
    await sink.insert_status(first.row)

    second = await detector.should_persist(_status(last_connection="2024-01-01T00:05:00.000Z"))
    assert not second.persist


@pytest.mark.asyncio
async def test_unreadable_untracked_column_does_not_force_a_write() -> None:
    row = {**_status().to_row(), "deviceId": {"x": 1}, "lastConnection": ["?"]}

    decision = await ChangeDetector(_FakeReader(row)).should_persist(_status())

    assert not decision.persist
    assert decision.reason is DecisionReason.UNCHANGED


@pytest.mark.asyncio
async def test_unreadable_tracked_column_persists_as_bootstrap() -> None:
    row = {**_status().to_row(), "motion": {"state": "idle"}}

    decision = await ChangeDetector(_FakeReader(row)).should_persist(_status())

    assert decision.persist
    assert decision.reason is DecisionReason.BOOTSTRAP
