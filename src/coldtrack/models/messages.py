"""Outbound observer protocol.

Each message is a JSON object discriminated by ``type``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import ConfigDict, Field, TypeAdapter

from coldtrack.models._base import TrackerBaseModel
from coldtrack.models.item import TrackedItem
from coldtrack.models.records import AlertRecord, EventRecord, NotificationRecord
from coldtrack.models.station import Station, StationStatus


class _Message(TrackerBaseModel):
    model_config = ConfigDict(frozen=True)


class SnapshotMessage(_Message):
    """Full state, sent once to each new observer."""

    type: Literal["snapshot"] = "snapshot"
    stations: dict[str, Station]
    items: dict[str, TrackedItem]
    events: list[EventRecord]
    alerts: list[AlertRecord]
    notifications: list[NotificationRecord]


class MovementMessage(_Message):
    type: Literal["movement"] = "movement"
    event: EventRecord
    item: TrackedItem
    stations: dict[str, Station]
    notification: NotificationRecord


class AlertMessage(_Message):
    type: Literal["alert"] = "alert"
    alert: AlertRecord


class StatusMessage(_Message):
    type: Literal["status"] = "status"
    station: str
    status: StationStatus


OutboundMessage = Annotated[
    SnapshotMessage | MovementMessage | AlertMessage | StatusMessage,
    Field(discriminator="type"),
]

_OUTBOUND_ADAPTER: TypeAdapter[OutboundMessage] = TypeAdapter(OutboundMessage)


def encode_message(message: OutboundMessage) -> str:
    """Serialize a message to the JSON text sent to observers."""
    return message.model_dump_json(by_alias=True)


def decode_message(text: str | bytes) -> OutboundMessage:
    """Parse observer JSON back into a typed message."""
    return _OUTBOUND_ADAPTER.validate_json(text)
