"""Location point and GPS telemetry models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pylightbug.ingestion.normalize import format_iso_utc, parse_timestamp, safe_number
from pylightbug.models._base import LightbugPayload, LightbugRecord, Number
from pylightbug.models.device import DeviceId


class LocationPoint(LightbugPayload):
    """One raw entry of ``GET /api/devices/{id}/points``.

    Upstream shape::

        {"timestamp": ..., "location": {"lat": ..., "lng": ...},
         "speed": ..., "course": ..., "accuracy": ..., "altitude": ...}

    The ``location`` object is flattened into ``latitude``/``longitude``.
    """

    timestamp: datetime | None = None
    latitude: Number | None = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    longitude: Number | None = Field(default=None, validation_alias=AliasChoices("lng", "lon", "longitude"))
    speed: Number | None = None
    heading: Number | None = Field(default=None, validation_alias=AliasChoices("course", "heading", "direction"))
    accuracy: Number | None = None
    altitude: Number | None = Field(default=None, validation_alias=AliasChoices("altitude", "alt"))

    @classmethod
    def _reshape(cls, values: dict[str, Any]) -> dict[str, Any]:
        location = values.get("location")
        merged = {key: value for key, value in values.items() if key not in {"lat", "lng", "lon", "latitude", "longitude"}}
        if isinstance(location, dict):
            for key in ("lat", "lng", "lon", "latitude", "longitude"):
                if key in location:
                    merged[key] = location[key]
        return merged

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("latitude", "longitude", "speed", "heading", "accuracy", "altitude", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Number | None:
        return safe_number(value)

    @property
    def has_fix(self) -> bool:
        """Whether the point carries a timestamp and a full lat/lng pair."""
        return self.timestamp is not None and self.latitude is not None and self.longitude is not None


class GpsFix(LightbugRecord):
    """Latest GPS point of a cycle, normalized.

    ``timestamp`` is ISO-8601 UTC with millisecond precision
    (``2024-01-01T00:00:00.000Z``).
    """

    timestamp: str
    lat: Number
    lon: Number
    speed: Number | None = None
    heading: Number | None = None
    accuracy: Number | None = None
    altitude: Number | None = None

    @classmethod
    def from_point(cls, point: LocationPoint) -> GpsFix | None:
        """Build a fix, or ``None`` when the point lacks a timestamp or coordinates."""
        if not point.has_fix:
            return None
        assert point.timestamp is not None  # noqa: S101
        assert point.latitude is not None and point.longitude is not None  # noqa: S101
        return cls(
            timestamp=format_iso_utc(point.timestamp),
            lat=point.latitude,
            lon=point.longitude,
            speed=point.speed,
            heading=point.heading,
            accuracy=point.accuracy,
            altitude=point.altitude,
        )


class TelemetryRecord(LightbugRecord):
    """One persisted GPS fix."""

    serial: str
    device_id: DeviceId | None = Field(default=None, alias="deviceID")
    timestamp: str
    latitude: Number
    longitude: Number
    altitude: Number | None = None
    speed: Number | None = None
    heading: Number | None = None
    accuracy: Number | None = None

    @classmethod
    def from_fix(cls, serial: str, device_id: DeviceId | None, fix: GpsFix) -> TelemetryRecord:
        return cls(
            serial=serial,
            device_id=device_id,
            timestamp=fix.timestamp,
            latitude=fix.lat,
            longitude=fix.lon,
            altitude=fix.altitude,
            speed=fix.speed,
            heading=fix.heading,
            accuracy=fix.accuracy,
        )

    def to_row(self) -> dict[str, Any]:
        """Row for the telemetry table.

        The table stores ``serial`` as BIGINT and ``deviceID`` as TEXT.
        """
        row = super().to_row()
        if self.serial.isdigit():
            row["serial"] = int(self.serial)
        if self.device_id is not None:
            row["deviceID"] = str(self.device_id)
        return row
