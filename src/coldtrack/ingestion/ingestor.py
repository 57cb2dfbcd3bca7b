"""Event ingestion pipeline.

Applies one normalized inbound event to the store and returns the
outbound messages observers should receive. The caller owns delivery and
serialization of calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from coldtrack.exceptions import MalformedMessageError
from coldtrack.models._base import utcnow
from coldtrack.models.item import HistoryEntry
from coldtrack.models.messages import AlertMessage, MovementMessage, OutboundMessage, StatusMessage
from coldtrack.models.records import AlertRecord, EventRecord, NotificationRecord
from coldtrack.models.station import StationStatus
from coldtrack.state.aggregate import recompute_station_counts
from coldtrack.state.events import HeartbeatEvent, InboundEvent, MovementEvent, StatusUpdateEvent
from coldtrack.state.store import StateStore
from coldtrack.state.transitions import TransitionTable

_logger = logging.getLogger(__name__)


class EventIngestor:
    def __init__(
        self,
        store: StateStore,
        table: TransitionTable,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._table = table
        self._clock = clock

    def ingest(self, event: InboundEvent) -> list[OutboundMessage]:
        """Apply *event*; return the messages to broadcast, in order.

        Raises :class:`~coldtrack.exceptions.UnknownStationError` before any
        mutation when the event names a station that is not provisioned.
        """
        if isinstance(event, MovementEvent):
            return self._ingest_movement(event)
        if isinstance(event, HeartbeatEvent):
            return self._ingest_heartbeat(event)
        if isinstance(event, StatusUpdateEvent):
            return self._ingest_status(event)
        raise MalformedMessageError(f"Unsupported event kind: {type(event).__name__}")

    def _ingest_movement(self, event: MovementEvent) -> list[OutboundMessage]:
        station = self._store.station(event.station)
        now = self._clock()

        item, created = self._store.get_or_create_item(event.item_id, event.station)
        if created:
            _logger.info("Tracking new item %s, first seen at %s", item.id, station.id)

        decision = self._table.decide(item.state, event.station)
        alert: AlertRecord | None = None
        if decision.is_violation:
            alert = AlertRecord(
                item_id=item.id,
                origin=decision.origin,
                destination=decision.destination,
                timestamp=now,
                message=f"Invalid transition: {decision.origin} -> {decision.destination}",
            )
            self._store.alerts.append(alert)
            item.alerts.append(alert)
            _logger.warning(
                "Invalid transition for item %s: %s -> %s",
                item.id,
                decision.origin,
                decision.destination,
            )
        else:
            if item.state != decision.resulting_state:
                _logger.debug("Item %s advanced %s -> %s", item.id, item.state, decision.resulting_state)
            item.state = decision.resulting_state

        # Per-item history never goes back in time, even if the clock does.
        recorded_at = now
        if item.history and item.history[-1].timestamp > recorded_at:
            recorded_at = item.history[-1].timestamp
        item.history.append(HistoryEntry(station=station.id, timestamp=recorded_at, reported_at=event.timestamp))

        station.mark_reading(now)
        recompute_station_counts(self._store)

        notification = NotificationRecord(
            item_id=item.id,
            station=station.id,
            station_name=station.name,
            timestamp=now,
            message=f"Tag {item.id} read at {station.name}",
        )
        self._store.notifications.append(notification)

        record = EventRecord(
            item_id=item.id,
            station=station.id,
            state=item.state,
            timestamp=now,
            reported_at=event.timestamp,
        )
        self._store.events.append(record)

        messages: list[OutboundMessage] = []
        if alert is not None:
            messages.append(AlertMessage(alert=alert))
        messages.append(
            MovementMessage(
                event=record,
                item=item.model_copy(deep=True),
                stations=self._store.stations_copy(),
                notification=notification,
            )
        )
        return messages

    def _ingest_heartbeat(self, event: HeartbeatEvent) -> list[OutboundMessage]:
        station = self._store.station(event.station)
        revived = station.mark_reading(self._clock())
        if not revived:
            return []
        _logger.info("Station %s back online", station.id)
        return [StatusMessage(station=station.id, status=StationStatus.ONLINE)]

    def _ingest_status(self, event: StatusUpdateEvent) -> list[OutboundMessage]:
        station = self._store.station(event.station)
        if station.status != event.status:
            _logger.info("Station %s reported %s", station.id, event.status)
        station.status = event.status
        return [StatusMessage(station=station.id, status=event.status)]
