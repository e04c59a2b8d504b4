"""Custom exception hierarchy for pylightbug."""

from __future__ import annotations


class LightbugError(Exception):
    """Base exception for all pylightbug errors."""


class LightbugConfigError(LightbugError):
    """Invalid or missing configuration."""


class LightbugTransportError(LightbugError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class LightbugApiError(LightbugError):
    """The API answered, but not with the shape we expected."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class LightbugAuthenticationError(LightbugApiError):
    """Login failed or returned no token."""


class LightbugPersistenceError(LightbugError):
    """The persistence sink could not serve a read the caller depends on.

    Inserts never raise this; they log and report ``False`` instead.  Only
    reads whose failure must abort the current cycle (the tracker roster)
    surface it.
    """

    def __init__(self, message: str, *, table: str = "") -> None:
        self.table = table
        super().__init__(message)
