"""Supabase persistence sink.

Talks to the project's PostgREST endpoint (``<SUPABASE_URL>/rest/v1``)
over the shared aiohttp transport:

  - POST /rest/v1/<telemetry_table>                      insert one fix
  - POST /rest/v1/<status_table>                         insert one status row
  - GET  /rest/v1/<status_table>?serial=eq.<s>&order=created_at.desc&limit=1
  - GET  /rest/v1/<roster_table>?select=<roster_column>
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pylightbug._constants import REST_PREFIX
from pylightbug._transport import HttpTransport, Transport
from pylightbug.config import LightbugConfig
from pylightbug.exceptions import LightbugError, LightbugPersistenceError
from pylightbug.models.status import StatusRecord
from pylightbug.models.telemetry import TelemetryRecord

_logger = logging.getLogger(__name__)

_INSERT_HEADERS = {"prefer": "return=minimal"}


def build_supabase_transport(http_session: aiohttp.ClientSession, config: LightbugConfig) -> HttpTransport:
    """Transport pre-authenticated with the service key."""
    return HttpTransport(
        http_session,
        config.supabase_url,
        headers={
            "apikey": config.supabase_key,
            "authorization": f"Bearer {config.supabase_key}",
        },
        timeout=config.request_timeout,
    )


class SupabaseSink:
    """PostgREST-backed implementation of :class:`PersistenceSink`."""

    def __init__(
        self,
        transport: Transport,
        *,
        telemetry_table: str,
        status_table: str,
        roster_table: str,
        roster_column: str,
    ) -> None:
        self._transport = transport
        self._telemetry_table = telemetry_table
        self._status_table = status_table
        self._roster_table = roster_table
        self._roster_column = roster_column

    @classmethod
    def from_config(cls, transport: Transport, config: LightbugConfig) -> SupabaseSink:
        return cls(
            transport,
            telemetry_table=config.telemetry_table,
            status_table=config.status_table,
            roster_table=config.roster_table,
            roster_column=config.roster_column,
        )

    async def _insert(self, table: str, row: dict[str, Any]) -> None:
        await self._transport.request_json(
            "POST",
            f"{REST_PREFIX}/{table}",
            json_body=[row],
            headers=_INSERT_HEADERS,
        )

    async def insert_telemetry(self, record: TelemetryRecord) -> bool:
        try:
            await self._insert(self._telemetry_table, record.to_row())
        except LightbugError as exc:
            _logger.error("Telemetry insert failed for %s: %s", record.serial, exc)
            return False
        _logger.info("Telemetry inserted for %s at %s", record.serial, record.timestamp)
        return True

    async def insert_status(self, record: StatusRecord) -> bool:
        try:
            await self._insert(self._status_table, record.to_row())
        except LightbugError as exc:
            _logger.error("Status insert failed for %s: %s", record.serial, exc)
            return False
        _logger.info("Status inserted for %s", record.serial)
        return True

    async def get_last_status(self, serial: str) -> dict[str, Any] | None:
        try:
            rows = await self._transport.request_json(
                "GET",
                f"{REST_PREFIX}/{self._status_table}",
                params={
                    "select": "*",
                    "serial": f"eq.{serial}",
                    "order": "created_at.desc",
                    "limit": "1",
                },
            )
        except LightbugError as exc:
            _logger.error("Last status lookup failed for %s: %s", serial, exc)
            return None
        if isinstance(rows, list) and rows and isinstance(rows[0], dict):
            return rows[0]
        return None

    async def list_active_tracker_serials(self) -> list[str]:
        try:
            rows = await self._transport.request_json(
                "GET",
                f"{REST_PREFIX}/{self._roster_table}",
                params={"select": self._roster_column},
            )
        except LightbugError as exc:
            raise LightbugPersistenceError(
                f"Roster query failed: {exc}",
                table=self._roster_table,
            ) from exc
        if not isinstance(rows, list):
            raise LightbugPersistenceError(
                f"Roster query returned {type(rows).__name__} instead of rows",
                table=self._roster_table,
            )

        serials: list[str] = []
        for row in rows:
            value = row.get(self._roster_column) if isinstance(row, dict) else None
            if value is None or str(value).strip() == "":
                _logger.debug("Skipping roster row without a serial: %s", row)
                continue
            serials.append(str(value).strip())
        return serials
