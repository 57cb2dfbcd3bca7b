"""Tracking engine facade."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from coldtrack.broadcast import BroadcastFanout, Observer
from coldtrack.config import TrackerConfig
from coldtrack.exceptions import ColdtrackError
from coldtrack.ingestion.ingestor import EventIngestor
from coldtrack.ingestion.mqtt import parse_message
from coldtrack.models._base import utcnow
from coldtrack.models.messages import OutboundMessage, SnapshotMessage
from coldtrack.monitor import StalenessMonitor
from coldtrack.state.events import InboundEvent
from coldtrack.state.store import StateStore
from coldtrack.state.transitions import TransitionTable

_logger = logging.getLogger(__name__)


class Tracker:
    """Owns the store and every component that touches it.

    All mutations run on the event loop the tracker was entered on; that
    loop is the single writer. Transport runtimes hand messages to
    :meth:`handle_message` on that loop.

    Usage::

        async with Tracker(config) as tracker:
            observer = tracker.connect_observer()
            tracker.handle_message("coldchain/production/movement", b'{"itemId": "A1"}')
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._config = config if config is not None else TrackerConfig()
        self._table = TransitionTable(self._config.station_ids)
        self._store = StateStore(
            self._config.stations,
            clock=clock,
            event_log_capacity=self._config.event_log_capacity,
            notification_log_capacity=self._config.notification_log_capacity,
            alert_log_capacity=self._config.alert_log_capacity,
        )
        self._ingestor = EventIngestor(self._store, self._table, clock=clock)
        self._fanout = BroadcastFanout(queue_size=self._config.observer_queue_size)
        self._monitor = StalenessMonitor(
            self._store,
            stale_after=timedelta(seconds=self._config.stale_after_seconds),
            interval_seconds=self._config.sweep_interval_seconds,
            clock=clock,
            on_messages=self._publish,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Tracker:
        self._monitor.start()
        _logger.info("Tracker started with stations %s", ", ".join(self._table.stations))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._monitor.stop()
        self._fanout.close_all()
        _logger.info("Tracker stopped")

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def table(self) -> TransitionTable:
        return self._table

    @property
    def fanout(self) -> BroadcastFanout:
        return self._fanout

    @property
    def monitor(self) -> StalenessMonitor:
        return self._monitor

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _publish(self, messages: list[OutboundMessage]) -> None:
        for message in messages:
            self._fanout.publish(message)

    def ingest(self, event: InboundEvent) -> list[OutboundMessage]:
        """Apply a normalized event and broadcast the resulting messages."""
        messages = self._ingestor.ingest(event)
        self._publish(messages)
        return messages

    def handle_message(self, topic: str, payload: bytes | str) -> list[OutboundMessage]:
        """Decode and apply one transport message.

        Malformed messages are logged and dropped without touching state.
        """
        try:
            event = parse_message(topic, payload, prefix=self._config.topic_prefix)
            _logger.debug("Inbound %s from %s", event.kind, event.station)
            return self.ingest(event)
        except ColdtrackError as exc:
            _logger.warning("Dropping message on %s: %s", topic, exc)
            return []

    def sweep(self) -> list[OutboundMessage]:
        """Run one staleness pass immediately and broadcast its messages."""
        messages = self._monitor.sweep()
        self._publish(messages)
        return messages

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def snapshot(self) -> SnapshotMessage:
        return self._store.snapshot()

    def connect_observer(self, name: str = "") -> Observer:
        """Register an observer whose first queued message is the full snapshot."""
        return self._fanout.register(name=name, snapshot=self._store.snapshot())

    def disconnect_observer(self, observer: Observer) -> None:
        self._fanout.unregister(observer)
