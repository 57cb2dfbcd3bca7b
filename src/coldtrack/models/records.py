"""Log records kept in the bounded windows and sent to observers."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import ConfigDict

from coldtrack.models._base import TrackerBaseModel


class AlertKind(StrEnum):
    INVALID_TRANSITION = "invalid_transition"


class AlertRecord(TrackerBaseModel):
    """A rejected lifecycle transition."""

    model_config = ConfigDict(frozen=True)

    kind: AlertKind = AlertKind.INVALID_TRANSITION
    item_id: str
    origin: str
    destination: str
    timestamp: datetime
    message: str


class NotificationRecord(TrackerBaseModel):
    """A human-facing "tag was read" notice."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    station: str
    station_name: str
    timestamp: datetime
    message: str


class EventRecord(TrackerBaseModel):
    """A movement reading and the lifecycle state it resulted in."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    station: str
    state: str
    timestamp: datetime
    reported_at: datetime | None = None
