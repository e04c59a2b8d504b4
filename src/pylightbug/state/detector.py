"""Change detection against the last persisted status row."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from pylightbug.models.status import TRACKED_STATUS_FIELDS, StatusRecord
from pylightbug.state.policy import changed_fields

_logger = logging.getLogger(__name__)


class LastStatusReader(Protocol):
    async def get_last_status(self, serial: str) -> dict[str, Any] | None: ...


class DecisionReason(StrEnum):
    BOOTSTRAP = "bootstrap"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class PersistDecision(BaseModel):
    """Outcome of :meth:`ChangeDetector.should_persist`.

    ``row`` is the status to write when ``persist`` is true.
    """

    model_config = ConfigDict(frozen=True)

    persist: bool
    reason: DecisionReason
    row: StatusRecord | None = None
    changed: tuple[str, ...] = ()


class ChangeDetector:
    """Decide whether a freshly fetched status warrants a new row.

    The last known status lives in the sink, not here; every call performs
    one lookup (at most one row) and keeps no state of its own.
    """

    def __init__(self, reader: LastStatusReader) -> None:
        self._reader = reader

    async def should_persist(self, status: StatusRecord) -> PersistDecision:
        last_row = await self._reader.get_last_status(status.serial)
        if last_row is None:
            _logger.info("No previous status for %s; inserting first row", status.serial)
            return PersistDecision(persist=True, reason=DecisionReason.BOOTSTRAP, row=status)

        try:
            previous = StatusRecord.model_validate(
                {"serial": status.serial, **{name: last_row.get(name) for name in TRACKED_STATUS_FIELDS}}
            )
        except ValidationError:
            _logger.warning("Unreadable previous status row for %s; inserting", status.serial, exc_info=True)
            return PersistDecision(persist=True, reason=DecisionReason.BOOTSTRAP, row=status)

        changed = changed_fields(previous, status)
        if not changed:
            _logger.info("Status unchanged for %s; skipping insert", status.serial)
            return PersistDecision(persist=False, reason=DecisionReason.UNCHANGED)

        _logger.info("Status changed for %s (%s); inserting", status.serial, ", ".join(changed))
        return PersistDecision(persist=True, reason=DecisionReason.CHANGED, row=status, changed=changed)
