"""Tracked item model."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from coldtrack._constants import TERMINAL_STATE
from coldtrack.models._base import TrackerBaseModel
from coldtrack.models.records import AlertRecord


class HistoryEntry(TrackerBaseModel):
    """One raw reading of an item, accepted or not."""

    model_config = ConfigDict(frozen=True)

    station: str
    timestamp: datetime
    """Tracker clock at ingestion; monotonic per item."""
    reported_at: datetime | None = None
    """Timestamp carried by the reading itself, if any."""


class TrackedItem(TrackerBaseModel):
    id: str
    state: str
    history: list[HistoryEntry] = Field(default_factory=list)
    alerts: list[AlertRecord] = Field(default_factory=list)
    created_at: datetime

    @property
    def is_completed(self) -> bool:
        return self.state == TERMINAL_STATE
