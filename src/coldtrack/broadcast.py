"""Observer registry and change-notification fanout.

Each message is serialized once and offered to every registered
observer's bounded queue. A full queue drops its oldest message, so a
slow observer loses history instead of stalling ingestion.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading

from coldtrack.models.messages import OutboundMessage, encode_message

_logger = logging.getLogger(__name__)

_observer_ids = itertools.count(1)


class Observer:
    """One connected observer's outbound queue.

    ``offer`` and ``close`` must be called from the event loop that
    consumes the queue.
    """

    def __init__(self, *, queue_size: int, name: str = "") -> None:
        self.id = next(_observer_ids)
        self.name = name or f"observer-{self.id}"
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=queue_size)
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def _make_room(self) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1

    def offer(self, text: str) -> bool:
        """Queue *text* without blocking; return ``False`` if closed."""
        if self._closed:
            return False
        self._make_room()
        self._queue.put_nowait(text)
        return True

    async def get(self) -> str | None:
        """Next message, or ``None`` once the observer is closed and drained."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._make_room()
        self._queue.put_nowait(None)


class BroadcastFanout:
    def __init__(self, *, queue_size: int = 256) -> None:
        self._queue_size = queue_size
        self._observers: set[Observer] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    @property
    def observers(self) -> tuple[Observer, ...]:
        with self._lock:
            return tuple(self._observers)

    def register(self, *, name: str = "", snapshot: OutboundMessage | None = None) -> Observer:
        """Create and register an observer, queuing *snapshot* as its first message."""
        observer = Observer(queue_size=self._queue_size, name=name)
        if snapshot is not None:
            observer.offer(encode_message(snapshot))
        with self._lock:
            self._observers.add(observer)
        _logger.info("Observer %s connected (%d total)", observer.name, len(self))
        return observer

    def unregister(self, observer: Observer) -> None:
        with self._lock:
            self._observers.discard(observer)
        observer.close()
        _logger.info("Observer %s disconnected, dropped=%d", observer.name, observer.dropped)

    def publish(self, message: OutboundMessage) -> int:
        """Offer *message* to every open observer; return how many accepted it."""
        text = encode_message(message)
        delivered = 0
        for observer in self.observers:
            if observer.offer(text):
                delivered += 1
        _logger.debug("Published %s to %d observer(s)", message.type, delivered)
        return delivered

    def close_all(self) -> None:
        with self._lock:
            observers = tuple(self._observers)
            self._observers.clear()
        for observer in observers:
            observer.close()
