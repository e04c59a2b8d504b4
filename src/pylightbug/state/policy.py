"""Status write-suppression policy.

Pure functions only: no I/O and no payload parsing.  Both sides are
already-normalized :class:`StatusRecord` values.
"""

from __future__ import annotations

from pylightbug.models.status import TRACKED_STATUS_FIELDS, StatusRecord


def changed_fields(previous: StatusRecord, current: StatusRecord) -> tuple[str, ...]:
    """Names of the tracked fields whose values differ."""
    return tuple(
        name
        for name, before, after in zip(
            TRACKED_STATUS_FIELDS, previous.tracked_values(), current.tracked_values(), strict=True
        )
        if before != after
    )


def status_changed(previous: StatusRecord, current: StatusRecord) -> bool:
    """Whether *current* differs from *previous* in any tracked field.

    ``last_connection`` and ``device_id`` are ignored.
    """
    return bool(changed_fields(previous, current))
