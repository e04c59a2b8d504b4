"""Login endpoint.

Endpoint:
  - POST /v2/users/login  ``{"username": ..., "password": ...}`` → ``{"token": ...}``
"""

from __future__ import annotations

import logging

from pylightbug._constants import LOGIN_ENDPOINT
from pylightbug._redact import redact_for_log
from pylightbug._transport import Transport
from pylightbug.exceptions import LightbugAuthenticationError, LightbugTransportError
from pylightbug.models.token import AuthToken

_logger = logging.getLogger(__name__)


async def login(transport: Transport, email: str, password: str) -> AuthToken:
    """Exchange account credentials for a bearer token.

    Raises
    ------
    LightbugAuthenticationError
        If the API rejects the credentials or answers without a token.
    LightbugTransportError
        On network failures other than a 401/403.
    """
    _logger.info("Logging in to Lightbug as %s", email)
    try:
        response = await transport.request_json(
            "POST",
            LOGIN_ENDPOINT,
            json_body={"username": email, "password": password},
        )
    except LightbugTransportError as exc:
        if exc.status_code in (401, 403):
            raise LightbugAuthenticationError(
                f"Login rejected (HTTP {exc.status_code})",
                endpoint=LOGIN_ENDPOINT,
            ) from exc
        raise

    _logger.debug("Login response: %s", redact_for_log(response))

    token = response.get("token") if isinstance(response, dict) else None
    if not isinstance(token, str) or not token.strip():
        raise LightbugAuthenticationError("Login response did not contain a token", endpoint=LOGIN_ENDPOINT)

    _logger.info("Login successful")
    return AuthToken(token=token.strip(), raw=response)
