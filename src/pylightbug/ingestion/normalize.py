"""Normalization helpers.

Centralizes lenient parsing of Lightbug payload values.  Nothing in this
module raises for bad input; unparseable values become ``None``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

# Placeholder strings treated as "no value".
_PLACEHOLDERS = frozenset({"", "--", "null", "NaN", "nan"})

# Epoch values at or above this are milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def _is_placeholder(value: Any) -> bool:
    return isinstance(value, str) and value.strip() in _PLACEHOLDERS


def safe_number(value: Any) -> int | float | None:
    """Return *value* as a number, keeping ints as ints.

    Booleans are not numbers here; numeric strings are parsed.
    """
    if value is None or isinstance(value, bool) or _is_placeholder(value):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            result = float(text)
        except ValueError:
            return None
        return None if math.isnan(result) or math.isinf(result) else result
    return None


def safe_str(value: Any) -> str | None:
    if value is None or _is_placeholder(value):
        return None
    if isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text if text else None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an upstream timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (``Z`` suffix, explicit offset, or naive which
    is read as UTC), epoch seconds or milliseconds, and datetimes.
    """
    if value is None or isinstance(value, bool) or _is_placeholder(value):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        number = safe_number(text)
        if number is not None:
            return parse_timestamp(number)
        if text.endswith(("z", "Z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_iso_utc(value: datetime) -> str:
    """Format *value* as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def normalize_timestamp(value: Any) -> str | None:
    """Parse and re-format a timestamp as strict ISO-8601 UTC."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return format_iso_utc(parsed)


def select_latest_point(points: Iterable[Any]) -> dict[str, Any] | None:
    """Return the point with the greatest timestamp.

    Entries that are not dicts, carry an empty timestamp, or carry a
    timestamp that does not parse are ignored.  On equal timestamps the
    entry seen last wins.  Returns ``None`` when nothing is left.
    """
    latest: dict[str, Any] | None = None
    latest_ts: datetime | None = None
    for point in points:
        if not isinstance(point, dict) or not point.get("timestamp"):
            continue
        ts = parse_timestamp(point["timestamp"])
        if ts is None:
            continue
        if latest_ts is None or ts >= latest_ts:
            latest, latest_ts = point, ts
    return latest


def unwrap_data(payload: Any) -> Any:
    """Return ``payload["data"]`` when the API wrapped its answer, else *payload*."""
    if isinstance(payload, dict) and "data" in payload and isinstance(payload["data"], (dict, list)):
        return payload["data"]
    return payload
