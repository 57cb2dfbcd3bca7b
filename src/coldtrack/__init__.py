"""coldtrack - Cold-chain item tracking engine with live observer fanout."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("coldtrack")
except PackageNotFoundError:
    __version__ = "0+local"
from coldtrack._constants import TERMINAL_STATE
from coldtrack.broadcast import BroadcastFanout, Observer
from coldtrack.config import StationSpec, TrackerConfig
from coldtrack.exceptions import (
    ColdtrackError,
    MalformedMessageError,
    TrackerConfigError,
    UnknownStationError,
)
from coldtrack.models import (
    AlertMessage,
    AlertRecord,
    EventRecord,
    HistoryEntry,
    MovementMessage,
    NotificationRecord,
    SnapshotMessage,
    Station,
    StationStatus,
    StatusMessage,
    TrackedItem,
)
from coldtrack.monitor import StalenessMonitor
from coldtrack.state.events import EventKind, HeartbeatEvent, MovementEvent, StatusUpdateEvent
from coldtrack.state.store import StateStore
from coldtrack.state.transitions import TransitionDecision, TransitionOutcome, TransitionTable
from coldtrack.tracker import Tracker

__all__ = [
    "__version__",
    "TERMINAL_STATE",
    "AlertMessage",
    "AlertRecord",
    "BroadcastFanout",
    "ColdtrackError",
    "EventKind",
    "EventRecord",
    "HeartbeatEvent",
    "HistoryEntry",
    "MalformedMessageError",
    "MovementEvent",
    "MovementMessage",
    "NotificationRecord",
    "Observer",
    "SnapshotMessage",
    "StalenessMonitor",
    "StateStore",
    "Station",
    "StationSpec",
    "StationStatus",
    "StatusMessage",
    "StatusUpdateEvent",
    "TrackedItem",
    "Tracker",
    "TrackerConfig",
    "TrackerConfigError",
    "TransitionDecision",
    "TransitionOutcome",
    "TransitionTable",
    "UnknownStationError",
]
