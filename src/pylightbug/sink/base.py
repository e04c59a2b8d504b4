"""Persistence sink interface."""

from __future__ import annotations

from typing import Any, Protocol

from pylightbug.models.status import StatusRecord
from pylightbug.models.telemetry import TelemetryRecord


class PersistenceSink(Protocol):
    """Storage operations the poller depends on.

    Implementations log and swallow insert failures (returning ``False``);
    ``list_active_tracker_serials`` raises
    :class:`~pylightbug.exceptions.LightbugPersistenceError` because a
    cycle cannot proceed without a roster.
    """

    async def insert_telemetry(self, record: TelemetryRecord) -> bool: ...

    async def insert_status(self, record: StatusRecord) -> bool: ...

    async def get_last_status(self, serial: str) -> dict[str, Any] | None:
        """Most recently inserted status row for *serial*, or ``None``."""
        ...

    async def list_active_tracker_serials(self) -> list[str]: ...
