"""Base model and timestamp handling shared by all coldtrack records.

Every record inherits from :class:`TrackerBaseModel` which provides
``alias_generator=to_camel`` so snake_case fields serialize to the
camelCase keys observers expect (``itemId``, ``lastReading``, ...).
Inbound payloads may use either spelling.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Convert an ISO-8601 string or epoch number to an aware UTC datetime.

    Naive values are assumed to be UTC. Raises :class:`ValueError` for
    strings that are not ISO-8601 and for non-finite or out-of-range numbers.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bool):
        raise ValueError("timestamp must be an ISO-8601 string or epoch number")
    if isinstance(value, (int, float)):
        try:
            ts = float(value)
        except OverflowError as exc:
            raise ValueError(f"timestamp out of range: {value!r}") from exc
        if not math.isfinite(ts):
            raise ValueError(f"timestamp must be finite, got {value!r}")
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=UTC)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"timestamp out of range: {value!r}") from exc
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    raise ValueError(f"unsupported timestamp value: {value!r}")


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Aware UTC datetime accepting ISO-8601 strings or epoch seconds/milliseconds."""


class TrackerBaseModel(BaseModel):
    """Base for coldtrack records and wire messages."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
