"""Base models shared by Lightbug payloads and persisted records.

Two families live in :mod:`pylightbug.models`:

* **Payload models** (:class:`LightbugPayload`) parse what the upstream API
  sends.  They never raise for a dict input: placeholder values are
  dropped in a ``mode="before"`` validator and every field has a default,
  so a missing or garbled field simply ends up ``None``.  The input
  dict is kept in ``raw``.
* **Record models** (:class:`LightbugRecord`) are the normalized shapes the
  poller persists.  Field names are snake_case in Python and camelCase in
  the stored row (``alias_generator=to_camel``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Number = int | float
"""Numeric payload value; ints are kept as ints so stored rows match the API."""

# Placeholder strings the upstream API uses for "not available".
_PLACEHOLDERS = frozenset({"", "--", "null", "NaN", "nan"})


class LightbugPayload(BaseModel):
    """Base for leniently parsed upstream payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Unmodified API dict."""

    @classmethod
    def _reshape(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Rearrange an upstream dict before field parsing (identity by default)."""
        return values

    @model_validator(mode="before")
    @classmethod
    def _drop_placeholders(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = {
            key: value
            for key, value in cls._reshape(values).items()
            if key != "raw" and value is not None and not (isinstance(value, str) and value.strip() in _PLACEHOLDERS)
        }
        # An upstream "raw" key never reaches the field.
        cleaned["raw"] = values
        return cleaned


class LightbugRecord(BaseModel):
    """Base for normalized records written to the persistence sink."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_row(self) -> dict[str, Any]:
        """Return the JSON-ready row as stored by the sink."""
        return self.model_dump(mode="json", by_alias=True)
