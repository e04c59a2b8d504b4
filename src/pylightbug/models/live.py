"""Merged live record returned by the fetcher for one tracker and one cycle."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pylightbug.models._base import Number
from pylightbug.models.device import DeviceId
from pylightbug.models.status import DeviceStatusPayload, StatusRecord
from pylightbug.models.telemetry import GpsFix, TelemetryRecord


class LiveRecord(BaseModel):
    """Status fields plus the latest GPS fix (``gps`` is ``None`` when absent)."""

    model_config = ConfigDict(frozen=True)

    serial: str
    device_id: DeviceId
    battery: Number | None = None
    temperature: Number | None = None
    motion: str | None = None
    mode: str | None = None
    last_connection: str | None = None
    gps: GpsFix | None = None

    @classmethod
    def from_status(
        cls,
        serial: str,
        device_id: DeviceId,
        status: DeviceStatusPayload,
        gps: GpsFix | None = None,
    ) -> LiveRecord:
        return cls(
            serial=serial,
            device_id=device_id,
            battery=status.battery,
            temperature=status.temperature,
            motion=status.motion,
            mode=status.mode,
            last_connection=status.last_connection,
            gps=gps,
        )

    def status_record(self) -> StatusRecord:
        return StatusRecord(
            serial=self.serial,
            device_id=self.device_id,
            battery=self.battery,
            temperature=self.temperature,
            motion=self.motion,
            mode=self.mode,
            last_connection=self.last_connection,
        )

    def telemetry_record(self) -> TelemetryRecord | None:
        if self.gps is None:
            return None
        return TelemetryRecord.from_fix(self.serial, self.device_id, self.gps)
