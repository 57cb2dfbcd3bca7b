"""Lifecycle transition policy.

This module is pure: it never touches the store. The ingestor asks it
what a reading means and applies the answer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from coldtrack._constants import TERMINAL_STATE
from coldtrack.exceptions import TrackerConfigError


class TransitionOutcome(StrEnum):
    IDEMPOTENT = "idempotent"
    ADVANCE = "advance"
    VIOLATION = "violation"


@dataclass(frozen=True)
class TransitionDecision:
    outcome: TransitionOutcome
    origin: str
    destination: str
    """Attempted destination, i.e. the station that produced the reading."""
    resulting_state: str

    @property
    def is_violation(self) -> bool:
        return self.outcome == TransitionOutcome.VIOLATION


class TransitionTable:
    """Directed successor table over an ordered station sequence.

    Each station allows exactly one successor: the next station, or the
    terminal state for the last one.
    """

    def __init__(self, stations: Iterable[str]) -> None:
        order = tuple(stations)
        if not order:
            raise TrackerConfigError("Transition table needs at least one station")
        if len(set(order)) != len(order) or TERMINAL_STATE in order:
            raise TrackerConfigError(f"Invalid station sequence: {order}")
        self._order = order
        self._successors: dict[str, str] = {
            station: order[index + 1] if index + 1 < len(order) else TERMINAL_STATE
            for index, station in enumerate(order)
        }

    @property
    def stations(self) -> tuple[str, ...]:
        return self._order

    @property
    def states(self) -> frozenset[str]:
        """Every state an item may be in."""
        return frozenset(self._order) | {TERMINAL_STATE}

    @property
    def successors(self) -> Mapping[str, str]:
        return dict(self._successors)

    def successor(self, state: str) -> str | None:
        """Allowed next station for *state*; ``None`` once terminal."""
        return self._successors.get(state)

    def state_after(self, station: str) -> str:
        """Lifecycle state an item holds after validly entering *station*."""
        if self._successors.get(station) == TERMINAL_STATE:
            return TERMINAL_STATE
        return station

    def decide(self, current: str, incoming: str) -> TransitionDecision:
        """Classify a reading at *incoming* for an item in state *current*.

        Order matters: a repeat reading is never a violation, a reading at
        the successor always advances, anything else is rejected and the
        item keeps its state.
        """
        if incoming == current:
            return TransitionDecision(TransitionOutcome.IDEMPOTENT, current, incoming, current)
        if self._successors.get(current) == incoming:
            return TransitionDecision(TransitionOutcome.ADVANCE, current, incoming, self.state_after(incoming))
        return TransitionDecision(TransitionOutcome.VIOLATION, current, incoming, current)
