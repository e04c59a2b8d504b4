"""Helpers for safe debug logging.

The poller handles the Lightbug account password, the bearer token and the
Supabase service key, and a single points response can carry hundreds of
entries.  :func:`redact_for_log` masks the secrets and trims both long
strings and long lists before a payload reaches a DEBUG log line.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "accesstoken",
        "refreshtoken",
        "authorization",
        "apikey",
        "supabasekey",
        "servicekey",
    }
)

_REDACTED = "<redacted>"


def _is_sensitive(key: str) -> bool:
    return key.replace("_", "").replace("-", "").lower() in _SENSITIVE_KEYS


def redact_for_log(
    value: Any,
    *,
    max_string: int = 256,
    max_items: int = 5,
    _depth: int = 0,
) -> Any:
    """Return a copy of *value* that is safe and short enough to log.

    Mapping keys naming a credential are replaced by ``"<redacted>"``.
    Sequences keep their first *max_items* entries followed by a
    ``"…<N more>"`` marker.
    """
    if _depth > 10:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, Mapping):
        return {
            str(key): (
                _REDACTED
                if _is_sensitive(str(key))
                else redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            )
            for key, item in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        head = [
            redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for item in value[:max_items]
        ]
        if len(value) > max_items:
            head.append(f"…<{len(value) - max_items} more>")
        return head

    return repr(value)
