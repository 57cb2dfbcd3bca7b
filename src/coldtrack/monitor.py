"""Station staleness monitor.

Marks stations offline once they have been silent for longer than the
configured threshold. Runs as an asyncio task on the tracker's loop so
its mutations share the ingestion path's serialization domain.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from coldtrack.models._base import utcnow
from coldtrack.models.messages import OutboundMessage, StatusMessage
from coldtrack.models.station import StationStatus
from coldtrack.state.store import StateStore

_logger = logging.getLogger(__name__)


class StalenessMonitor:
    def __init__(
        self,
        store: StateStore,
        *,
        stale_after: timedelta = timedelta(seconds=30),
        interval_seconds: float = 10.0,
        clock: Callable[[], datetime] = utcnow,
        on_messages: Callable[[list[OutboundMessage]], None] | None = None,
    ) -> None:
        self._store = store
        self._stale_after = stale_after
        self._interval = interval_seconds
        self._clock = clock
        self._on_messages = on_messages
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self) -> list[OutboundMessage]:
        """Run one pass; return one status message per station taken offline."""
        now = self._clock()
        messages: list[OutboundMessage] = []
        for station in self._store.stations.values():
            if station.last_reading is None or station.status == StationStatus.OFFLINE:
                continue
            if now - station.last_reading > self._stale_after:
                station.status = StationStatus.OFFLINE
                _logger.warning(
                    "Station %s marked offline, last reading %s",
                    station.id,
                    station.last_reading.isoformat(),
                )
                messages.append(StatusMessage(station=station.id, status=StationStatus.OFFLINE))
        return messages

    def start(self) -> None:
        """Schedule the periodic sweep on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="coldtrack-staleness")
        _logger.debug("Staleness monitor started interval=%ss threshold=%s", self._interval, self._stale_after)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        _logger.debug("Staleness monitor stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                messages = self.sweep()
                if messages and self._on_messages is not None:
                    self._on_messages(messages)
            except Exception:
                _logger.exception("Staleness sweep failed")
