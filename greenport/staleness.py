# -*- coding: utf-8 -*-
"""
Staleness Tracker - AGENT-PORT-001: Port Electrification Engine

Decides whether a held calculation result is still trustworthy.

Two signals drive the decision:

1. **Assumption fingerprint**: a result is tagged with the fingerprint of
   the profile it was computed under. When the live fingerprint differs, the
   result was computed under other prices and is discarded outright.
2. **Input generation**: a counter bumped on every port or terminal edit.
   When it moved past the generation recorded with the result, the result is
   kept but flagged stale.

All transitions are pure functions ``TrackerState -> TrackerState`` that end
in :func:`reconcile`. :class:`StalenessTracker` holds the current state and
applies each transition under one lock, so no caller ever observes a state
between a mutation and its reconciliation.

Example:
    >>> from greenport.staleness import StalenessTracker
    >>> tracker = StalenessTracker()
    >>> tracker.record_fingerprint("0:")
    >>> tracker.record_result(result, "0:")
    >>> tracker.record_fingerprint("1:ab12...")
    >>> tracker.state.cleared_by_assumption_change
    True

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ResultStatus(str, Enum):
    """Classification of the held result."""
    NONE = "none"
    FRESH = "fresh"
    STALE = "stale"
    CLEARED = "cleared"


# ---------------------------------------------------------------------------
# State and signals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TrackerState:
    """Immutable snapshot of the tracker.

    Attributes:
        current_fingerprint: Live fingerprint of the active profile, None
            until it has been fetched.
        result: Held calculation result, if any.
        result_fingerprint: Fingerprint the result was computed under, None
            for results loaded without one.
        input_generation: Counter bumped on every input edit.
        result_generation: input_generation when the result was recorded.
        stale: Result is shown but inputs changed since it was computed.
        marked_stale: Result was explicitly flagged stale.
        cleared_by_assumption_change: A result was discarded because the
            fingerprint changed; stays set until a fresh calculation.
    """

    current_fingerprint: Optional[str] = None
    result: Optional[Any] = None
    result_fingerprint: Optional[str] = None
    input_generation: int = 0
    result_generation: int = 0
    stale: bool = False
    marked_stale: bool = False
    cleared_by_assumption_change: bool = False

    @property
    def has_result(self) -> bool:
        return self.result is not None

    @property
    def status(self) -> ResultStatus:
        """Classify the held result."""
        if self.result is None:
            if self.cleared_by_assumption_change:
                return ResultStatus.CLEARED
            return ResultStatus.NONE
        return ResultStatus.STALE if self.stale else ResultStatus.FRESH


@dataclass(frozen=True)
class Signals:
    """Driving-signal changes applied before reconciliation.

    Attributes:
        fingerprint: New live fingerprint, None when unchanged.
        input_changed: Whether an input edit happened.
    """

    fingerprint: Optional[str] = None
    input_changed: bool = False


def _fingerprints_known(state: TrackerState) -> bool:
    return bool(state.result_fingerprint) and bool(state.current_fingerprint)


def reconcile(state: TrackerState, signals: Optional[Signals] = None) -> TrackerState:
    """Apply signals and classify the held result.

    Rules, in order:

    1. A result exists and both fingerprints are known and differ: the
       result is discarded and ``cleared_by_assumption_change`` is set.
    2. A result exists otherwise: it is stale when the input generation moved
       or it was marked stale; ``cleared_by_assumption_change`` resets when
       both fingerprints are known and equal.
    3. No result: nothing is stale and the cleared flag is kept.

    Args:
        state: Current state.
        signals: Optional signal changes.

    Returns:
        New reconciled state.
    """
    if signals is not None:
        if signals.fingerprint is not None:
            state = replace(state, current_fingerprint=signals.fingerprint)
        if signals.input_changed:
            state = replace(state, input_generation=state.input_generation + 1)

    if state.result is not None:
        if _fingerprints_known(state) and state.result_fingerprint != state.current_fingerprint:
            logger.info(
                "Assumption fingerprint changed (%s -> %s); discarding result",
                state.result_fingerprint, state.current_fingerprint,
            )
            return replace(
                state,
                result=None,
                stale=False,
                marked_stale=False,
                cleared_by_assumption_change=True,
            )
        cleared = state.cleared_by_assumption_change
        if _fingerprints_known(state):
            cleared = False
        return replace(
            state,
            stale=(
                state.input_generation != state.result_generation
                or state.marked_stale
            ),
            cleared_by_assumption_change=cleared,
        )

    return replace(state, stale=False, marked_stale=False)


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def record_input_change(state: TrackerState) -> TrackerState:
    """A port or terminal input was edited."""
    return reconcile(state, Signals(input_changed=True))


def record_fingerprint(state: TrackerState, fingerprint: str) -> TrackerState:
    """The live fingerprint was (re)computed, e.g. after an override edit."""
    return reconcile(state, Signals(fingerprint=fingerprint))


def record_result(
    state: TrackerState,
    result: Any,
    fingerprint: Optional[str] = None,
    generation: Optional[int] = None,
) -> TrackerState:
    """A calculation finished under ``fingerprint``.

    ``generation`` is the input generation the calculation started from;
    when inputs changed since then the result is held stale.
    """
    return reconcile(replace(
        state,
        result=result,
        result_fingerprint=(
            fingerprint if fingerprint is not None else state.result_fingerprint
        ),
        result_generation=(
            generation if generation is not None else state.input_generation
        ),
        stale=False,
        marked_stale=False,
        cleared_by_assumption_change=(
            state.cleared_by_assumption_change if result is None else False
        ),
    ))


def mark_stale(state: TrackerState) -> TrackerState:
    """Flag the held result stale without an input change."""
    return reconcile(replace(state, marked_stale=state.result is not None))


def load_saved_result(state: TrackerState, result: Optional[Any]) -> TrackerState:
    """A saved result without fingerprint was loaded; show it as stale."""
    generation = state.input_generation + 1
    return reconcile(replace(
        state,
        result=result,
        result_fingerprint=None,
        input_generation=generation,
        result_generation=generation,
        marked_stale=result is not None,
    ))


def load_project(state: TrackerState) -> TrackerState:
    """A project baseline was loaded without a scenario."""
    generation = state.input_generation + 1
    return reconcile(replace(
        state,
        result=None,
        result_fingerprint=None,
        input_generation=generation,
        result_generation=generation,
        stale=False,
        marked_stale=False,
        cleared_by_assumption_change=False,
    ))


def load_project_scenario(
    state: TrackerState,
    result: Optional[Any],
    assumption_hash: Optional[str],
    current_fingerprint: Optional[str] = None,
) -> TrackerState:
    """A saved scenario was loaded with the fingerprint it was saved under.

    The result is held under the saved hash and reconciled against
    ``current_fingerprint``, the live fingerprint of the scenario profile.
    Without one the saved hash stands in as the live fingerprint.
    """
    generation = state.input_generation + 1
    return reconcile(replace(
        state,
        result=result,
        result_fingerprint=assumption_hash,
        current_fingerprint=(
            current_fingerprint if current_fingerprint is not None else assumption_hash
        ),
        input_generation=generation,
        result_generation=generation,
        stale=False,
        marked_stale=False,
        cleared_by_assumption_change=False,
    ))


def clear(state: TrackerState) -> TrackerState:
    """Reset everything except the live fingerprint."""
    return TrackerState(current_fingerprint=state.current_fingerprint)


# ===========================================================================
# StalenessTracker
# ===========================================================================


class StalenessTracker:
    """Thread-safe holder of a :class:`TrackerState`.

    Every method applies one pure transition under the lock and returns the
    resulting snapshot.
    """

    def __init__(self, state: Optional[TrackerState] = None) -> None:
        self._state = state or TrackerState()
        self._lock = threading.Lock()

    @property
    def state(self) -> TrackerState:
        with self._lock:
            return self._state

    def _apply(self, transition: Callable[..., TrackerState], *args: Any) -> TrackerState:
        with self._lock:
            self._state = transition(self._state, *args)
            return self._state

    def record_input_change(self) -> TrackerState:
        return self._apply(record_input_change)

    def record_fingerprint(self, fingerprint: str) -> TrackerState:
        return self._apply(record_fingerprint, fingerprint)

    def record_result(
        self,
        result: Any,
        fingerprint: Optional[str] = None,
        generation: Optional[int] = None,
    ) -> TrackerState:
        return self._apply(record_result, result, fingerprint, generation)

    def mark_stale(self) -> TrackerState:
        return self._apply(mark_stale)

    def load_saved_result(self, result: Optional[Any]) -> TrackerState:
        return self._apply(load_saved_result, result)

    def load_project(self) -> TrackerState:
        return self._apply(load_project)

    def load_project_scenario(
        self,
        result: Optional[Any],
        assumption_hash: Optional[str],
        current_fingerprint: Optional[str] = None,
    ) -> TrackerState:
        return self._apply(
            load_project_scenario, result, assumption_hash, current_fingerprint,
        )

    def clear(self) -> TrackerState:
        return self._apply(clear)


__all__ = [
    "ResultStatus",
    "TrackerState",
    "Signals",
    "reconcile",
    "record_input_change",
    "record_fingerprint",
    "record_result",
    "mark_stale",
    "load_saved_result",
    "load_project",
    "load_project_scenario",
    "clear",
    "StalenessTracker",
]
