"""Data models for Lightbug API payloads and persisted records."""

from pylightbug.models._base import LightbugPayload, LightbugRecord, Number
from pylightbug.models.device import DeviceId, DeviceIdentity, DeviceSummary
from pylightbug.models.live import LiveRecord
from pylightbug.models.status import TRACKED_STATUS_FIELDS, DeviceStatusPayload, StatusRecord
from pylightbug.models.telemetry import GpsFix, LocationPoint, TelemetryRecord
from pylightbug.models.token import AuthToken

__all__ = [
    "AuthToken",
    "DeviceId",
    "DeviceIdentity",
    "DeviceStatusPayload",
    "DeviceSummary",
    "GpsFix",
    "LightbugPayload",
    "LightbugRecord",
    "LiveRecord",
    "LocationPoint",
    "Number",
    "StatusRecord",
    "TelemetryRecord",
    "TRACKED_STATUS_FIELDS",
]
