"""Poller configuration for pylightbug."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pylightbug._constants import (
    BASE_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_ROSTER_COLUMN,
    DEFAULT_ROSTER_TABLE,
    DEFAULT_STATUS_TABLE,
    DEFAULT_TELEMETRY_TABLE,
)
from pylightbug.exceptions import LightbugConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class LightbugConfig:
    """Poller configuration.

    Parameters
    ----------
    email : str
        Lightbug account email.
    password : str
        Lightbug account password.
    base_url : str
        Lightbug API base URL.
    supabase_url : str
        Supabase project URL (PostgREST lives under ``/rest/v1``).
    supabase_key : str
        Supabase service key, sent as ``apikey`` and bearer token.
    poll_interval : float
        Seconds to wait after a cycle ends before starting the next one.
    request_timeout : float
        Total timeout for a single HTTP request in seconds.
    api_trace_enabled : bool
        Log redacted upstream payloads at DEBUG level.
    telemetry_table, status_table, roster_table : str
        Table names used by the Supabase sink.
    roster_column : str
        Column of ``roster_table`` holding the tracker serial.
    """

    email: str
    password: str
    base_url: str = BASE_URL
    supabase_url: str = ""
    supabase_key: str = ""
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    api_trace_enabled: bool = False
    telemetry_table: str = DEFAULT_TELEMETRY_TABLE
    status_table: str = DEFAULT_STATUS_TABLE
    roster_table: str = DEFAULT_ROSTER_TABLE
    roster_column: str = DEFAULT_ROSTER_COLUMN

    @classmethod
    def from_env(cls, **overrides: Any) -> LightbugConfig:
        """Create configuration from environment variables.

        Reads ``LIGHTBUG_EMAIL``, ``LIGHTBUG_PASSWORD``, ``SUPABASE_URL``,
        ``SUPABASE_SERVICE_KEY`` and the optional ``LIGHTBUG_*`` variables.
        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "LIGHTBUG_EMAIL": "email",
            "LIGHTBUG_PASSWORD": "password",
            "LIGHTBUG_BASE_URL": "base_url",
            "SUPABASE_URL": "supabase_url",
            "SUPABASE_SERVICE_KEY": "supabase_key",
            "LIGHTBUG_TELEMETRY_TABLE": "telemetry_table",
            "LIGHTBUG_STATUS_TABLE": "status_table",
            "LIGHTBUG_ROSTER_TABLE": "roster_table",
            "LIGHTBUG_ROSTER_COLUMN": "roster_column",
        }
        config_kwargs: dict[str, Any] = {"email": "", "password": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("LIGHTBUG_POLL_INTERVAL")
        if interval_env is not None and "poll_interval" not in overrides:
            try:
                config_kwargs["poll_interval"] = float(interval_env)
            except ValueError as exc:
                raise LightbugConfigError(f"LIGHTBUG_POLL_INTERVAL is not a number: {interval_env!r}") from exc

        timeout_env = env.get("LIGHTBUG_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise LightbugConfigError(f"LIGHTBUG_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("LIGHTBUG_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

    def validate(self, *, require_sink: bool = True) -> None:
        """Raise :class:`LightbugConfigError` if required settings are missing."""
        missing: list[str] = []
        if not self.email:
            missing.append("LIGHTBUG_EMAIL")
        if not self.password:
            missing.append("LIGHTBUG_PASSWORD")
        if require_sink:
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_key:
                missing.append("SUPABASE_SERVICE_KEY")
        if missing:
            raise LightbugConfigError(f"Missing configuration: {', '.join(missing)}")
        if self.poll_interval < 0:
            raise LightbugConfigError(f"poll_interval must be >= 0, got {self.poll_interval}")
