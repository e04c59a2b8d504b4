"""In-process persistence sink (dry runs and tests)."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from pylightbug.models.status import StatusRecord
from pylightbug.models.telemetry import TelemetryRecord

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MemorySink:
    """Keeps rows in lists, in insertion order.

    Every stored row gets an ``id`` and a ``created_at`` like the real
    tables do, so "most recent first" means "inserted last".
    """

    def __init__(
        self,
        serials: Iterable[str] = (),
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.roster: list[str] = [str(serial) for serial in serials]
        self.telemetry_rows: list[dict[str, Any]] = []
        self.status_rows: list[dict[str, Any]] = []
        self._clock = clock
        self._next_id = 1

    def _stamp(self, row: dict[str, Any]) -> dict[str, Any]:
        row["id"] = self._next_id
        row["created_at"] = self._clock().isoformat()
        self._next_id += 1
        return row

    async def insert_telemetry(self, record: TelemetryRecord) -> bool:
        row = self._stamp(record.to_row())
        self.telemetry_rows.append(row)
        _logger.info("Telemetry stored in memory for %s at %s", record.serial, record.timestamp)
        return True

    async def insert_status(self, record: StatusRecord) -> bool:
        row = self._stamp(record.to_row())
        self.status_rows.append(row)
        _logger.info("Status stored in memory for %s", record.serial)
        return True

    async def get_last_status(self, serial: str) -> dict[str, Any] | None:
        for row in reversed(self.status_rows):
            if str(row.get("serial")) == str(serial):
                return copy.deepcopy(row)
        return None

    async def list_active_tracker_serials(self) -> list[str]:
        return list(self.roster)
