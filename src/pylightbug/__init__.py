"""pylightbug - Poll Lightbug trackers and persist status and GPS telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pylightbug")
except PackageNotFoundError:
    __version__ = "0+local"
from pylightbug.client import LightbugClient
from pylightbug.config import LightbugConfig
from pylightbug.exceptions import (
    LightbugApiError,
    LightbugAuthenticationError,
    LightbugConfigError,
    LightbugError,
    LightbugPersistenceError,
    LightbugTransportError,
)
from pylightbug.identity import DeviceIdentityResolver
from pylightbug.ingestion.live import LiveDataFetcher
from pylightbug.models import (
    AuthToken,
    DeviceIdentity,
    DeviceStatusPayload,
    GpsFix,
    LiveRecord,
    LocationPoint,
    StatusRecord,
    TelemetryRecord,
)
from pylightbug.poller import CycleReport, PollerState, TrackerPoller
from pylightbug.sink import MemorySink, PersistenceSink, SupabaseSink
from pylightbug.state import ChangeDetector, PersistDecision

__all__ = [
    "__version__",
    "AuthToken",
    "ChangeDetector",
    "CycleReport",
    "DeviceIdentity",
    "DeviceIdentityResolver",
    "DeviceStatusPayload",
    "GpsFix",
    "LightbugApiError",
    "LightbugAuthenticationError",
    "LightbugClient",
    "LightbugConfig",
    "LightbugConfigError",
    "LightbugError",
    "LightbugPersistenceError",
    "LightbugTransportError",
    "LiveDataFetcher",
    "LiveRecord",
    "LocationPoint",
    "MemorySink",
    "PersistDecision",
    "PersistenceSink",
    "PollerState",
    "StatusRecord",
    "SupabaseSink",
    "TelemetryRecord",
    "TrackerPoller",
]
