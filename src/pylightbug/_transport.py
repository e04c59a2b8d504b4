"""JSON-over-HTTP transport shared by the Lightbug client and the Supabase sink."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pylightbug._constants import DEFAULT_REQUEST_TIMEOUT, USER_AGENT
from pylightbug.exceptions import LightbugTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules and sinks.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any: ...


class HttpTransport:
    """aiohttp transport that sends and receives JSON.

    ``headers`` are sent with every request; per-call headers are merged on
    top.  Every failure mode is raised as :class:`LightbugTransportError` so
    callers only have one exception type to recover from.
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._http = http_session
        self._base_url = base_url.rstrip("/")
        self._headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if headers:
            self._headers.update(headers)
        self._timeout_s = timeout
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    def with_headers(self, headers: Mapping[str, str]) -> HttpTransport:
        """Return a transport sharing this session with extra default headers."""
        merged = dict(self._headers)
        merged.update(headers)
        return HttpTransport(self._http, self._base_url, headers=merged, timeout=self._timeout_s)

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (``None`` if empty)."""
        url = f"{self._base_url}{path}"
        request_headers = dict(self._headers)
        if headers:
            request_headers.update(headers)

        data: str | None = None
        if json_body is not None:
            data = json.dumps(json_body, separators=(",", ":"))
            request_headers["content-type"] = "application/json"

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=data,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    raise LightbugTransportError(
                        f"HTTP {resp.status} from {method} {path}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=path,
                    )
        except LightbugTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise LightbugTransportError(
                f"Request to {method} {path} failed: {exc!r}",
                endpoint=path,
            ) from exc

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise LightbugTransportError(
                f"Invalid JSON from {method} {path}: {text[:200]}",
                endpoint=path,
            ) from exc
