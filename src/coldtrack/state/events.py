"""Normalized inbound events.

The transport binding converts every message it receives into one of
these events. Only the ingestor applies them to the store.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from coldtrack.models._base import Timestamp
from coldtrack.models.station import StationStatus


class EventKind(StrEnum):
    MOVEMENT = "movement"
    HEARTBEAT = "heartbeat"
    STATUS = "status"


class _InboundEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    station: str = Field(..., description="Station id")

    @field_validator("station")
    @classmethod
    def _normalize_station(cls, value: str) -> str:
        station = value.strip()
        if not station:
            raise ValueError("station must be non-empty")
        return station


class MovementEvent(_InboundEvent):
    """An item was read at a station."""

    kind: Literal[EventKind.MOVEMENT] = EventKind.MOVEMENT
    item_id: str = Field(..., validation_alias=AliasChoices("itemId", "item_id", "tag_id"))
    timestamp: Timestamp | None = None

    @field_validator("item_id", mode="before")
    @classmethod
    def _normalize_item_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("itemId must be non-empty")
        return value


class HeartbeatEvent(_InboundEvent):
    """Liveness signal from a station."""

    kind: Literal[EventKind.HEARTBEAT] = EventKind.HEARTBEAT
    timestamp: Timestamp | None = None


class StatusUpdateEvent(_InboundEvent):
    """Explicit station status reported by the station itself."""

    kind: Literal[EventKind.STATUS] = EventKind.STATUS
    status: StationStatus


InboundEvent = Annotated[
    MovementEvent | HeartbeatEvent | StatusUpdateEvent,
    Field(discriminator="kind"),
]

INBOUND_EVENT_ADAPTER: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)
