"""Device enumeration models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pylightbug.ingestion.normalize import safe_str
from pylightbug.models._base import LightbugPayload

DeviceId = int | str
"""Internal device identifier; opaque to the poller."""


class DeviceSummary(LightbugPayload):
    """One entry of the ``/v2/devices`` enumeration.

    ``serial`` and ``id`` are ``None`` when missing; the identity resolver
    decides what to do with such entries.
    """

    serial: str | None = Field(default=None, validation_alias=AliasChoices("serial", "serialNumber"))
    id: DeviceId | None = Field(default=None, validation_alias=AliasChoices("id", "deviceId"))
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "label"))

    @field_validator("serial", "name", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> DeviceId | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        return safe_str(value)


class DeviceIdentity(BaseModel):
    """Resolved serial → internal id pair."""

    model_config = ConfigDict(frozen=True)

    serial: str
    internal_id: DeviceId
