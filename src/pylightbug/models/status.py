"""Device status models."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import AliasChoices, Field, ValidationError, field_validator

from pylightbug.ingestion.normalize import normalize_timestamp, safe_number, safe_str
from pylightbug.models._base import LightbugPayload, LightbugRecord, Number
from pylightbug.models.device import DeviceId

_logger = logging.getLogger(__name__)

TRACKED_STATUS_FIELDS: tuple[str, ...] = ("battery", "temperature", "motion", "mode")
"""Fields whose change warrants a new status row.

``last_connection`` is deliberately absent: it moves on every poll.
"""


class DeviceStatusPayload(LightbugPayload):
    """Status object from ``GET /api/devices/{id}``.

    Upstream field names have drifted between API generations, so every
    field accepts the spellings seen in the wild.  A nested ``data`` object
    is merged over the top level.
    """

    battery: Number | None = Field(default=None, validation_alias=AliasChoices("batteryPct", "battery", "batteryLevel"))
    temperature: Number | None = Field(default=None, validation_alias=AliasChoices("temperature", "temp"))
    motion: str | None = Field(default=None, validation_alias=AliasChoices("motion", "motionState"))
    mode: str | None = Field(default=None, validation_alias=AliasChoices("currentMode", "mode"))
    last_connection: str | None = Field(
        default=None,
        validation_alias=AliasChoices("lastConnection", "last_connection", "lastSeen"),
    )

    @classmethod
    def _reshape(cls, values: dict[str, Any]) -> dict[str, Any]:
        nested = values.get("data")
        if not isinstance(nested, dict):
            return values
        merged = dict(values)
        merged.update(nested)
        return merged

    @field_validator("battery", "temperature", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Number | None:
        return safe_number(value)

    @field_validator("motion", "mode", mode="before")
    @classmethod
    def _coerce_labels(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("last_connection", mode="before")
    @classmethod
    def _coerce_last_connection(cls, value: Any) -> str | None:
        return normalize_timestamp(value) or safe_str(value)

    @classmethod
    def from_api(cls, payload: Any) -> DeviceStatusPayload:
        """Parse *payload*; anything that is not an object yields an empty status."""
        if not isinstance(payload, dict):
            return cls()
        try:
            return cls.model_validate(payload)
        except ValidationError:
            _logger.warning("Unparseable status payload; treating every field as absent", exc_info=True)
            return cls()


class StatusRecord(LightbugRecord):
    """Normalized status row, one per poll cycle per tracker."""

    serial: str
    device_id: DeviceId | None = None
    battery: Number | None = None
    temperature: Number | None = None
    motion: str | None = None
    mode: str | None = None
    last_connection: str | None = None

    @field_validator("serial", mode="before")
    @classmethod
    def _coerce_serial(cls, value: Any) -> Any:
        # Stored rows may carry a BIGINT serial.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def tracked_values(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in TRACKED_STATUS_FIELDS)
