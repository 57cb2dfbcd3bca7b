"""Monitoring station model."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from coldtrack.models._base import TrackerBaseModel


class StationStatus(StrEnum):
    ONLINE = "online"
    OFFLINE = "offline"


class Station(TrackerBaseModel):
    """A fixed monitoring point in the lifecycle sequence."""

    id: str
    name: str
    last_reading: datetime | None = None
    status: StationStatus = StationStatus.OFFLINE
    item_count: int = 0
    """Number of items currently in this station's state (derived)."""

    def mark_reading(self, at: datetime) -> bool:
        """Record a reading and mark the station online.

        Returns ``True`` when the station was offline before.
        """
        was_offline = self.status != StationStatus.ONLINE
        self.last_reading = at
        self.status = StationStatus.ONLINE
        return was_offline
