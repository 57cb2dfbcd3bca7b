"""Custom exception hierarchy for coldtrack."""

from __future__ import annotations


class ColdtrackError(Exception):
    """Base exception for all coldtrack errors."""


class TrackerConfigError(ColdtrackError):
    """Invalid or missing configuration."""


class MalformedMessageError(ColdtrackError):
    """Inbound transport message could not be decoded.

    The message is dropped by the tracker; no state is touched.
    """

    def __init__(self, message: str, *, topic: str = "") -> None:
        self.topic = topic
        super().__init__(message)


class UnknownStationError(MalformedMessageError):
    """Message referenced a station id that is not provisioned."""

    def __init__(self, station: str, *, topic: str = "") -> None:
        self.station = station
        super().__init__(f"Unknown station: {station!r}", topic=topic)
