"""Tracker polling loop.

One *cycle* reads the active roster and, for each serial in turn, fetches
live data, writes the status row if it changed and writes the GPS fix if
there is one.  Cycles never overlap: the next one is armed ``interval``
seconds after the previous one *ends*.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from pylightbug._constants import DEFAULT_POLL_INTERVAL
from pylightbug.models.live import LiveRecord
from pylightbug.sink.base import PersistenceSink
from pylightbug.state.detector import ChangeDetector

_logger = logging.getLogger(__name__)


class LiveFetcher(Protocol):
    async def fetch_live(self, serial: str) -> LiveRecord | None: ...


class PollerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(slots=True)
class CycleReport:
    """Counters for one completed cycle."""

    trackers: int = 0
    skipped: int = 0
    failed: list[str] = field(default_factory=list)
    status_written: int = 0
    status_suppressed: int = 0
    telemetry_written: int = 0
    duration: float = 0.0

    def summary(self) -> str:
        return (
            f"{self.trackers} trackers, {self.skipped} skipped, {len(self.failed)} failed, "
            f"status {self.status_written} written/{self.status_suppressed} unchanged, "
            f"telemetry {self.telemetry_written} written in {self.duration:.1f}s"
        )


class TrackerPoller:
    """Drive fetch → change detection → persistence over the roster.

    Failures are isolated per tracker: an unexpected error while handling
    one serial is logged and the rest of the roster is still processed.
    A roster read failure aborts the cycle; :meth:`run` logs it and
    schedules the next cycle as usual.
    """

    def __init__(
        self,
        fetcher: LiveFetcher,
        sink: PersistenceSink,
        *,
        detector: ChangeDetector | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._sink = sink
        self._detector = detector or ChangeDetector(sink)
        self._interval = interval
        self._sleep = sleep
        self._state = PollerState.IDLE
        self._cycles = 0

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def cycles(self) -> int:
        """Number of cycles started so far."""
        return self._cycles

    async def _process_tracker(self, serial: str, report: CycleReport) -> None:
        record = await self._fetcher.fetch_live(serial)
        if record is None:
            report.skipped += 1
            return

        decision = await self._detector.should_persist(record.status_record())
        if decision.persist and decision.row is not None:
            if await self._sink.insert_status(decision.row):
                report.status_written += 1
        else:
            report.status_suppressed += 1

        telemetry = record.telemetry_record()
        if telemetry is not None and await self._sink.insert_telemetry(telemetry):
            report.telemetry_written += 1

    async def run_cycle(self) -> CycleReport:
        """Run one full pass over the roster.

        Raises whatever the roster read raises; per-tracker errors are
        caught and recorded in :attr:`CycleReport.failed`.
        """
        started = time.monotonic()
        report = CycleReport()

        serials = await self._sink.list_active_tracker_serials()
        report.trackers = len(serials)
        _logger.info("Polling %d trackers", len(serials))

        for serial in serials:
            try:
                await self._process_tracker(serial, report)
            except Exception:
                _logger.exception("Error processing tracker %s; continuing with the next one", serial)
                report.failed.append(serial)

        report.duration = time.monotonic() - started
        _logger.info("Cycle complete: %s", report.summary())
        return report

    async def run(self, *, max_cycles: int | None = None) -> None:
        """Run cycles until cancelled (or until *max_cycles* have run).

        No sleep follows the last of *max_cycles*.
        """
        while max_cycles is None or self._cycles < max_cycles:
            self._state = PollerState.RUNNING
            self._cycles += 1
            try:
                await self.run_cycle()
            except Exception:
                _logger.exception("Poll cycle %d failed", self._cycles)
            finally:
                self._state = PollerState.IDLE

            if max_cycles is not None and self._cycles >= max_cycles:
                break
            _logger.debug("Next cycle in %.1fs", self._interval)
            await self._sleep(self._interval)
