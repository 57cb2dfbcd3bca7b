"""Tracker configuration for coldtrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from coldtrack._constants import (
    ALERT_LOG_CAPACITY,
    DEFAULT_STATIONS,
    DEFAULT_TOPIC_PREFIX,
    EVENT_LOG_CAPACITY,
    NOTIFICATION_LOG_CAPACITY,
    OBSERVER_QUEUE_SIZE,
    STALE_AFTER_SECONDS,
    SWEEP_INTERVAL_SECONDS,
    TERMINAL_STATE,
)
from coldtrack.exceptions import TrackerConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StationSpec:
    """A provisioned monitoring station."""

    id: str
    name: str


def parse_stations(value: str) -> tuple[StationSpec, ...]:
    """Parse ``"id:Name,id:Name"`` into station specs.

    A bare ``id`` without ``:Name`` uses the id as display name.
    """
    specs: list[StationSpec] = []
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        station_id, _, name = chunk.partition(":")
        station_id = station_id.strip()
        specs.append(StationSpec(id=station_id, name=name.strip() or station_id))
    return tuple(specs)


def _default_stations() -> tuple[StationSpec, ...]:
    return tuple(StationSpec(id=sid, name=name) for sid, name in DEFAULT_STATIONS)


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration.

    Parameters
    ----------
    stations : tuple of StationSpec
        Station sequence in lifecycle order. Each station's only valid
        successor is the next one; the last leads to ``completed``.
    broker_host : str
        MQTT broker hostname.
    broker_port : int
        MQTT broker port.
    broker_username : str or None
        Optional MQTT username.
    broker_password : str or None
        Optional MQTT password.
    broker_tls : bool
        Enable TLS on the MQTT connection.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    topic_prefix : str
        Topic root; messages arrive on ``<prefix>/<station>/<type>``.
    http_host : str
        Bind address for the observer server.
    http_port : int
        Port for the observer server.
    static_dir : str or None
        Optional directory with dashboard assets to serve.
    stale_after_seconds : float
        Silence after which an online station is marked offline.
    sweep_interval_seconds : float
        Interval between staleness sweeps.
    event_log_capacity : int
        Size of the global movement event window.
    notification_log_capacity : int
        Size of the reading notification window.
    alert_log_capacity : int
        Size of the alert window.
    observer_queue_size : int
        Per-observer outbound queue size; the oldest message is dropped
        when a slow observer's queue is full.
    """

    stations: tuple[StationSpec, ...] = dataclasses.field(default_factory=_default_stations)
    broker_host: str = "broker.hivemq.com"
    broker_port: int = 1883
    broker_username: str | None = None
    broker_password: str | None = None
    broker_tls: bool = False
    mqtt_keepalive: int = 60
    topic_prefix: str = DEFAULT_TOPIC_PREFIX
    http_host: str = "0.0.0.0"
    http_port: int = 3000
    static_dir: str | None = None
    stale_after_seconds: float = STALE_AFTER_SECONDS
    sweep_interval_seconds: float = SWEEP_INTERVAL_SECONDS
    event_log_capacity: int = EVENT_LOG_CAPACITY
    notification_log_capacity: int = NOTIFICATION_LOG_CAPACITY
    alert_log_capacity: int = ALERT_LOG_CAPACITY
    observer_queue_size: int = OBSERVER_QUEUE_SIZE

    def __post_init__(self) -> None:
        if not self.stations:
            raise TrackerConfigError("At least one station is required")
        ids = [station.id for station in self.stations]
        if any(not sid for sid in ids):
            raise TrackerConfigError("Station ids must be non-empty")
        if len(set(ids)) != len(ids):
            raise TrackerConfigError(f"Duplicate station ids in {ids}")
        if TERMINAL_STATE in ids:
            raise TrackerConfigError(f"{TERMINAL_STATE!r} is reserved for the terminal state")
        for name in ("event_log_capacity", "notification_log_capacity", "alert_log_capacity", "observer_queue_size"):
            if getattr(self, name) < 1:
                raise TrackerConfigError(f"{name} must be positive")
        if self.stale_after_seconds <= 0 or self.sweep_interval_seconds <= 0:
            raise TrackerConfigError("Staleness threshold and sweep interval must be positive")

    @property
    def station_ids(self) -> tuple[str, ...]:
        return tuple(station.id for station in self.stations)

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from ``COLDTRACK_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        TrackerConfigError
            When a numeric variable cannot be parsed or the result is invalid.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "COLDTRACK_BROKER_HOST": "broker_host",
            "COLDTRACK_BROKER_USERNAME": "broker_username",
            "COLDTRACK_BROKER_PASSWORD": "broker_password",
            "COLDTRACK_TOPIC_PREFIX": "topic_prefix",
            "COLDTRACK_HTTP_HOST": "http_host",
            "COLDTRACK_STATIC_DIR": "static_dir",
        }
        _ENV_INT_MAP = {
            "COLDTRACK_BROKER_PORT": "broker_port",
            "COLDTRACK_MQTT_KEEPALIVE": "mqtt_keepalive",
            "COLDTRACK_HTTP_PORT": "http_port",
            "COLDTRACK_EVENT_LOG_CAPACITY": "event_log_capacity",
            "COLDTRACK_NOTIFICATION_LOG_CAPACITY": "notification_log_capacity",
            "COLDTRACK_ALERT_LOG_CAPACITY": "alert_log_capacity",
            "COLDTRACK_OBSERVER_QUEUE_SIZE": "observer_queue_size",
        }
        _ENV_FLOAT_MAP = {
            "COLDTRACK_STALE_AFTER_SECONDS": "stale_after_seconds",
            "COLDTRACK_SWEEP_INTERVAL_SECONDS": "sweep_interval_seconds",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_map, convert in ((_ENV_INT_MAP, int), (_ENV_FLOAT_MAP, float)):
            for env_key, field_name in env_map.items():
                val = env.get(env_key)
                if val is None or field_name in overrides:
                    continue
                try:
                    config_kwargs[field_name] = convert(val)
                except ValueError as exc:
                    raise TrackerConfigError(f"{env_key} is not a valid number: {val!r}") from exc

        stations_env = env.get("COLDTRACK_STATIONS")
        if stations_env is not None and "stations" not in overrides:
            config_kwargs["stations"] = parse_stations(stations_env)

        if "broker_tls" not in overrides:
            config_kwargs["broker_tls"] = _env_bool(env.get("COLDTRACK_BROKER_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
