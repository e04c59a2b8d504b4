"""Internal constants shared across the library."""

BASE_URL = "https://api.lightbug.cloud"
USER_AGENT = "pylightbug"

LOGIN_ENDPOINT = "/v2/users/login"
DEVICE_LIST_ENDPOINT = "/v2/devices"
DEVICE_STATUS_ENDPOINT = "/api/devices/{device_id}"
DEVICE_POINTS_ENDPOINT = "/api/devices/{device_id}/points"

# PostgREST prefix used by the Supabase sink.
REST_PREFIX = "/rest/v1"

DEFAULT_POLL_INTERVAL: float = 60.0
DEFAULT_REQUEST_TIMEOUT: float = 30.0

DEFAULT_TELEMETRY_TABLE = "deviceTelemetry"
DEFAULT_STATUS_TABLE = "deviceStatus"
DEFAULT_ROSTER_TABLE = "my_horses"
DEFAULT_ROSTER_COLUMN = "trackerID"
