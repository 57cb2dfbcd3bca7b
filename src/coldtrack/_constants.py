"""Internal constants shared across the library."""

#: Lifecycle state an item enters after the last station.
TERMINAL_STATE = "completed"

DEFAULT_TOPIC_PREFIX = "coldchain"

#: Default station sequence: (id, display name).
DEFAULT_STATIONS: tuple[tuple[str, str], ...] = (
    ("production", "Receiving"),
    ("cold_storage", "Storage"),
    ("shipping", "Shipping"),
)

# ------------------------------------------------------------------
# Policy values
# ------------------------------------------------------------------

STALE_AFTER_SECONDS = 30.0
SWEEP_INTERVAL_SECONDS = 10.0
EVENT_LOG_CAPACITY = 100
NOTIFICATION_LOG_CAPACITY = 20
ALERT_LOG_CAPACITY = 100
OBSERVER_QUEUE_SIZE = 256
