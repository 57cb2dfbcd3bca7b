"""In-memory state store.

This is the only component holding tracker state. It is not thread-safe
on its own: callers serialize mutations (the tracker runs every mutation
on its event loop).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from coldtrack.config import StationSpec
from coldtrack.exceptions import UnknownStationError
from coldtrack.models._base import utcnow
from coldtrack.models.item import TrackedItem
from coldtrack.models.messages import SnapshotMessage
from coldtrack.models.records import AlertRecord, EventRecord, NotificationRecord
from coldtrack.models.station import Station

T = TypeVar("T", bound=BaseModel)


class BoundedLog(Generic[T]):
    """FIFO window; appending past capacity evicts the oldest record."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._records: deque[T] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        maxlen = self._records.maxlen
        assert maxlen is not None
        return maxlen

    def append(self, record: T) -> T | None:
        """Append *record*; return the evicted record, if any."""
        evicted = self._records[0] if len(self._records) == self.capacity else None
        self._records.append(record)
        return evicted

    def items(self) -> list[T]:
        """Current contents, oldest first."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records))


class StateStore:
    """Canonical model: stations, tracked items and bounded logs."""

    def __init__(
        self,
        stations: Iterable[StationSpec],
        *,
        clock: Callable[[], datetime] = utcnow,
        event_log_capacity: int = 100,
        notification_log_capacity: int = 20,
        alert_log_capacity: int = 100,
    ) -> None:
        self._clock = clock
        self._stations: dict[str, Station] = {spec.id: Station(id=spec.id, name=spec.name) for spec in stations}
        self._items: dict[str, TrackedItem] = {}
        self.events: BoundedLog[EventRecord] = BoundedLog(event_log_capacity)
        self.notifications: BoundedLog[NotificationRecord] = BoundedLog(notification_log_capacity)
        self.alerts: BoundedLog[AlertRecord] = BoundedLog(alert_log_capacity)

    @property
    def stations(self) -> dict[str, Station]:
        """Live station map, in provisioning order. Do not mutate outside the writer."""
        return self._stations

    @property
    def items(self) -> dict[str, TrackedItem]:
        """Live item map. Do not mutate outside the writer."""
        return self._items

    def station(self, station_id: str) -> Station:
        station = self._stations.get(station_id)
        if station is None:
            raise UnknownStationError(station_id)
        return station

    def get_or_create_item(self, item_id: str, initial_state: str) -> tuple[TrackedItem, bool]:
        """Return ``(item, created)``.

        A new item starts in *initial_state*, whatever station that is.
        """
        item = self._items.get(item_id)
        if item is not None:
            return item, False
        item = TrackedItem(id=item_id, state=initial_state, created_at=self._clock())
        self._items[item_id] = item
        return item, True

    def stations_copy(self) -> dict[str, Station]:
        return {sid: station.model_copy(deep=True) for sid, station in self._stations.items()}

    def snapshot(self) -> SnapshotMessage:
        """Point-in-time copy of everything an observer needs."""
        return SnapshotMessage(
            stations=self.stations_copy(),
            items={iid: item.model_copy(deep=True) for iid, item in self._items.items()},
            events=self.events.items(),
            alerts=self.alerts.items(),
            notifications=self.notifications.items(),
        )
