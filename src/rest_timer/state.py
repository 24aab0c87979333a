"""Timer state and its transitions.

Every transition is a pure function of (state, now) returning a new
TimerState, so the state machine can be exercised without a live clock:

    Idle -> Running <-> Paused -> {Completed | Skipped}
    Running -> Completed            (elapsed reaches the recommendation)
    any -> Idle                     (reset)

Elapsed time is always derived from a monotonic anchor (``now - anchor``)
rather than counted ticks, so missed ticks never cause drift.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from enum import IntEnum, auto

from rest_engine.exceptions import ErrorKind, InvalidInputError
from rest_engine.models.calculation import AdaptiveRestCalculation
from rest_engine.models.enums import DEFAULT_REST_SECONDS
from rest_timer.exceptions import InvalidTransitionError


class TimerPhase(IntEnum):
    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()
    COMPLETED = auto()
    SKIPPED = auto()


TERMINAL_PHASES = frozenset({TimerPhase.COMPLETED, TimerPhase.SKIPPED})
ACTIVE_PHASES = frozenset({TimerPhase.RUNNING, TimerPhase.PAUSED})


@dataclass(frozen=True)
class TimerState:
    """State of one rest interval.

    ``anchor`` is the monotonic instant at which elapsed time was zero and
    is only set while running. ``frozen_elapsed`` holds the exact elapsed
    time whenever the clock is stopped; it may go negative after add_time
    while paused, but the reported ``elapsed_seconds`` never does.
    """

    phase: TimerPhase = TimerPhase.IDLE
    elapsed_seconds: int = 0
    recommendation: AdaptiveRestCalculation | None = None

    anchor: float | None = None
    frozen_elapsed: float = 0.0
    fired_checkpoints: frozenset[int] = field(default_factory=frozenset)
    completion_fired: bool = False

    def raw_elapsed(self, now: float) -> float:
        if self.phase == TimerPhase.RUNNING and self.anchor is not None:
            return now - self.anchor
        return self.frozen_elapsed

    def elapsed_at(self, now: float) -> int:
        return _whole_seconds(self.raw_elapsed(now))

    def target_seconds(self, default: int = DEFAULT_REST_SECONDS) -> int:
        if self.recommendation is None:
            return default
        return self.recommendation.recommended_rest_seconds


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view handed to callers at tick cadence."""

    phase: TimerPhase
    elapsed_seconds: int
    remaining_seconds: int
    progress: float  # 0.0-1.0
    recommended_rest_seconds: int
    recommendation: AdaptiveRestCalculation | None = None
    error_kind: ErrorKind | None = None

    @property
    def is_running(self) -> bool:
        return self.phase == TimerPhase.RUNNING

    @property
    def is_finished(self) -> bool:
        return self.phase in TERMINAL_PHASES


@dataclass(frozen=True)
class TickOutcome:
    """Result of evaluating one tick."""

    state: TimerState
    alerts: tuple[int, ...] = ()
    completed: bool = False


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def start(state: TimerState, now: float) -> TimerState:
    _require(state, "start", {TimerPhase.IDLE})
    return dataclasses.replace(
        state,
        phase=TimerPhase.RUNNING,
        elapsed_seconds=0,
        anchor=now,
        frozen_elapsed=0.0,
        fired_checkpoints=frozenset(),
        completion_fired=False,
    )


def pause(state: TimerState, now: float) -> TimerState:
    _require(state, "pause", {TimerPhase.RUNNING})
    return _stop_clock(state, now, TimerPhase.PAUSED)


def resume(state: TimerState, now: float) -> TimerState:
    """Re-anchor so elapsed continues exactly from the paused value."""
    _require(state, "resume", {TimerPhase.PAUSED})
    return dataclasses.replace(
        state,
        phase=TimerPhase.RUNNING,
        anchor=now - state.frozen_elapsed,
    )


def skip(state: TimerState, now: float) -> TimerState:
    _require(state, "skip", ACTIVE_PHASES)
    stopped = _stop_clock(state, now, TimerPhase.SKIPPED)
    return dataclasses.replace(stopped, completion_fired=True)


def reset(state: TimerState) -> TimerState:
    """Back to Idle from any phase; the recommendation is kept."""
    return TimerState(recommendation=state.recommendation)


def add_time(state: TimerState, delta_seconds: int, now: float) -> TimerState:
    """Extend the runway by moving the elapsed accounting backward.

    The recommendation itself is untouched; remaining time grows by
    ``delta_seconds`` and elapsed never reports below zero.
    """
    _require(state, "add time", ACTIVE_PHASES)
    if isinstance(delta_seconds, bool) or not isinstance(delta_seconds, (int, float)):
        raise InvalidInputError(f"delta_seconds must be a number, got {delta_seconds!r}")
    if delta_seconds <= 0:
        raise InvalidInputError(f"delta_seconds must be positive, got {delta_seconds}")

    if state.phase == TimerPhase.RUNNING and state.anchor is not None:
        shifted = dataclasses.replace(state, anchor=state.anchor + delta_seconds)
    else:
        shifted = dataclasses.replace(
            state, frozen_elapsed=state.frozen_elapsed - delta_seconds
        )
    return dataclasses.replace(shifted, elapsed_seconds=shifted.elapsed_at(now))


def with_recommendation(
    state: TimerState, recommendation: AdaptiveRestCalculation | None
) -> TimerState:
    return dataclasses.replace(state, recommendation=recommendation)


def advance(
    state: TimerState,
    now: float,
    checkpoints: frozenset[int] = frozenset(),
    *,
    default_rest_seconds: int = DEFAULT_REST_SECONDS,
    auto_complete: bool = True,
    alert_grace_seconds: int = 1,
) -> TickOutcome:
    """Evaluate one tick: refresh elapsed, collect due alerts, detect completion.

    A checkpoint is due when it has not fired yet this interval and
    ``checkpoint <= elapsed <= checkpoint + alert_grace_seconds``; one that
    was slept through entirely is dropped, not replayed later. Completion
    is reported at most once per interval.
    """
    if state.phase != TimerPhase.RUNNING:
        return TickOutcome(state=state)

    elapsed = state.elapsed_at(now)
    due = tuple(
        sorted(
            c
            for c in checkpoints
            if c not in state.fired_checkpoints and c <= elapsed <= c + alert_grace_seconds
        )
    )
    new_state = dataclasses.replace(
        state,
        elapsed_seconds=elapsed,
        fired_checkpoints=state.fired_checkpoints | frozenset(due),
    )

    target = state.target_seconds(default_rest_seconds)
    if auto_complete and elapsed >= target and not state.completion_fired:
        completed = _stop_clock(new_state, now, TimerPhase.COMPLETED)
        completed = dataclasses.replace(completed, completion_fired=True)
        return TickOutcome(state=completed, alerts=due, completed=True)

    return TickOutcome(state=new_state, alerts=due)


def snapshot(
    state: TimerState,
    now: float,
    default_rest_seconds: int = DEFAULT_REST_SECONDS,
    error_kind: ErrorKind | None = None,
) -> TimerSnapshot:
    elapsed = state.elapsed_at(now)
    target = state.target_seconds(default_rest_seconds)
    # Added time can push raw elapsed below zero; remaining must still count it
    remaining = max(0, math.ceil(target - state.raw_elapsed(now) - 1e-9))
    return TimerSnapshot(
        phase=state.phase,
        elapsed_seconds=elapsed,
        remaining_seconds=remaining,
        progress=min(elapsed / target, 1.0),
        recommended_rest_seconds=target,
        recommendation=state.recommendation,
        error_kind=error_kind,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _require(state: TimerState, action: str, allowed: set[TimerPhase] | frozenset[TimerPhase]) -> None:
    if state.phase not in allowed:
        raise InvalidTransitionError(action, state.phase)


def _stop_clock(state: TimerState, now: float, phase: TimerPhase) -> TimerState:
    raw = state.raw_elapsed(now)
    return dataclasses.replace(
        state,
        phase=phase,
        anchor=None,
        frozen_elapsed=raw,
        elapsed_seconds=_whole_seconds(raw),
    )


def _whole_seconds(raw: float) -> int:
    # Small epsilon so 2.9999999 from float subtraction still reads as 3
    return max(0, math.floor(raw + 1e-9))
