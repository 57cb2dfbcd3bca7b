"""Per-station item counts."""

from __future__ import annotations

from collections import Counter

from coldtrack.state.store import StateStore


def recompute_station_counts(store: StateStore) -> dict[str, int]:
    """Set every station's ``item_count`` from the items' current states.

    Items in the terminal state match no station and are not counted.
    Returns the new counts keyed by station id.
    """
    tally = Counter(item.state for item in store.items.values())
    counts: dict[str, int] = {}
    for station_id, station in store.stations.items():
        station.item_count = tally.get(station_id, 0)
        counts[station_id] = station.item_count
    return counts
