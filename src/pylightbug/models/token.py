"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthToken(BaseModel):
    """Bearer token returned by ``/v2/users/login``.

    The token is obtained once per process and never refreshed.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def authorization(self) -> str:
        return f"Bearer {self.token}"
