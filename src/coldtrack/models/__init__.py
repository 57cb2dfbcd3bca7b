"""Typed records and wire messages for coldtrack."""

from coldtrack.models._base import Timestamp, TrackerBaseModel, parse_timestamp
from coldtrack.models.item import HistoryEntry, TrackedItem
from coldtrack.models.messages import (
    AlertMessage,
    MovementMessage,
    OutboundMessage,
    SnapshotMessage,
    StatusMessage,
    decode_message,
    encode_message,
)
from coldtrack.models.records import AlertKind, AlertRecord, EventRecord, NotificationRecord
from coldtrack.models.station import Station, StationStatus

__all__ = [
    "AlertKind",
    "AlertMessage",
    "AlertRecord",
    "EventRecord",
    "HistoryEntry",
    "MovementMessage",
    "NotificationRecord",
    "OutboundMessage",
    "SnapshotMessage",
    "Station",
    "StationStatus",
    "StatusMessage",
    "Timestamp",
    "TrackedItem",
    "TrackerBaseModel",
    "decode_message",
    "encode_message",
    "parse_timestamp",
]
