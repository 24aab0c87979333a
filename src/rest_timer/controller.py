"""RestTimerController — the live countdown for one rest interval.

Owns a TimerState, a monotonic clock, the caller's callbacks and a
cooperative asyncio tick task. One controller per rest interval; close it
(or leave its ``async with`` block) when the caller moves on so no
callback fires afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from rest_engine.engine import RestEngine
from rest_engine.exceptions import ErrorKind, RestEngineError
from rest_engine.models.calculation import AdaptiveRestCalculation
from rest_engine.models.enums import CONFIDENCE_FALLBACK
from rest_timer import state as transitions
from rest_timer.clock import Clock, MonotonicClock
from rest_timer.config import TimerConfig
from rest_timer.context import SetContext
from rest_timer.exceptions import TimerClosedError
from rest_timer.state import TimerPhase, TimerSnapshot, TimerState

logger = logging.getLogger(__name__)

# Wake just after each whole-second boundary of elapsed time
_TICK_EPSILON_S = 0.005


def fallback_calculation(
    default_rest_seconds: int, exercise_id: str | None = None
) -> AdaptiveRestCalculation:
    """Fixed-duration recommendation used when the engine cannot answer."""
    return AdaptiveRestCalculation(
        recommended_rest_seconds=default_rest_seconds,
        base_rest_seconds=default_rest_seconds,
        adjustments=(),
        confidence=CONFIDENCE_FALLBACK,
        exercise_id=exercise_id,
        degraded=True,
    )


class RestTimerController:
    """Adaptive rest countdown with pause/resume/skip/reset/add-time controls.

    Usage:
        async with RestTimerController(engine, config, on_complete=next_set) as timer:
            await timer.activate(SetContext("user-1", "squat", PerformanceInput(2, 5, 100.0, 8)))
            timer.start()
            ...
    """

    def __init__(
        self,
        engine: RestEngine,
        config: TimerConfig | None = None,
        *,
        clock: Clock | None = None,
        on_alert: Optional[Callable[[int], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        on_tick: Optional[Callable[[TimerSnapshot], None]] = None,
    ) -> None:
        self._engine = engine
        self._config = config or TimerConfig()
        self._clock = clock or MonotonicClock()
        self._on_alert = on_alert
        self._on_complete = on_complete
        self._on_tick = on_tick

        self._state = TimerState()
        self._generation = 0
        self._active_key: tuple | None = None
        self._last_error: BaseException | None = None
        self._tick_task: asyncio.Task | None = None
        self._activation_task: asyncio.Task | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def phase(self) -> TimerPhase:
        return self._state.phase

    @property
    def recommendation(self) -> AdaptiveRestCalculation | None:
        return self._state.recommendation

    @property
    def last_error(self) -> BaseException | None:
        """Engine error behind the current fallback recommendation, if any."""
        return self._last_error

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def elapsed_seconds(self) -> int:
        return self.snapshot().elapsed_seconds

    @property
    def remaining_seconds(self) -> int:
        return self.snapshot().remaining_seconds

    @property
    def progress(self) -> float:
        return self.snapshot().progress

    def snapshot(self) -> TimerSnapshot:
        return transitions.snapshot(
            self._state,
            self._clock.now(),
            self._config.default_rest_seconds,
            error_kind=self._error_kind(),
        )

    # ------------------------------------------------------------------
    # Recommendation
    # ------------------------------------------------------------------

    async def activate(self, context: SetContext) -> AdaptiveRestCalculation | None:
        """Request a recommendation for *context*; the newest request wins.

        Returns the applied calculation, or None when a later activate()
        superseded this one (its result is discarded) or the controller was
        closed meanwhile. Calling again with an unchanged context is a no-op
        unless the previous attempt fell back after an engine error.
        Engine failures never propagate: a fixed fallback is applied and the
        error is kept in ``last_error``.
        """
        self._ensure_open()
        self._generation += 1
        if (
            context.key == self._active_key
            and self._state.recommendation is not None
            and self._last_error is None
        ):
            # Unchanged context; the bump above still invalidates older requests
            return self._state.recommendation

        generation = self._generation
        error: BaseException | None = None
        try:
            calculation = await self._engine.calculate(
                context.user_id, context.exercise_id, context.performance
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log = logger.warning if isinstance(exc, RestEngineError) else logger.exception
            log(
                "Rest calculation failed for exercise=%s, using %ds fallback: %s",
                context.exercise_id,
                self._config.default_rest_seconds,
                exc,
            )
            calculation = fallback_calculation(
                self._config.default_rest_seconds, context.exercise_id
            )
            error = exc

        if self._closed or generation != self._generation:
            logger.debug(
                "Discarding superseded rest calculation (generation %d, current %d)",
                generation,
                self._generation,
            )
            return None

        self._state = transitions.with_recommendation(self._state, calculation)
        self._active_key = context.key
        self._last_error = error
        if self._state.phase == TimerPhase.RUNNING:
            self._evaluate()
        return calculation

    def schedule_activate(self, context: SetContext) -> asyncio.Task:
        """Run activate() in the background, cancelling a still-pending one."""
        self._ensure_open()
        previous = self._activation_task
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.get_running_loop().create_task(self.activate(context))
        self._activation_task = task
        return task

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> None:
        self._ensure_open()
        self._state = transitions.start(self._state, self._clock.now())
        logger.debug("Rest timer started (%ds)", self._target())
        self._start_ticker()

    def pause(self) -> None:
        self._ensure_open()
        self._state = transitions.pause(self._state, self._clock.now())
        self._stop_ticker()
        logger.debug("Rest timer paused at %ds", self._state.elapsed_seconds)

    def resume(self) -> None:
        self._ensure_open()
        self._state = transitions.resume(self._state, self._clock.now())
        logger.debug("Rest timer resumed at %ds", self._state.elapsed_seconds)
        self._start_ticker()

    def skip(self) -> None:
        self._ensure_open()
        already_fired = self._state.completion_fired
        self._state = transitions.skip(self._state, self._clock.now())
        self._stop_ticker()
        logger.debug("Rest timer skipped at %ds", self._state.elapsed_seconds)
        if not already_fired:
            self._emit_complete()

    def reset(self) -> None:
        self._ensure_open()
        self._stop_ticker()
        self._state = transitions.reset(self._state)
        logger.debug("Rest timer reset")

    def add_time(self, delta_seconds: int) -> None:
        self._ensure_open()
        self._state = transitions.add_time(self._state, delta_seconds, self._clock.now())
        logger.debug("Added %ss rest, %ds remaining", delta_seconds, self.remaining_seconds)

    def tick(self) -> TimerSnapshot:
        """Evaluate alerts and completion once, then publish a snapshot."""
        if not self._closed:
            self._evaluate()
        current = self.snapshot()
        if self._on_tick is not None and not self._closed:
            try:
                self._on_tick(current)
            except Exception:
                logger.exception("on_tick callback raised")
        return current

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop the tick source and drop any pending activation."""
        if self._closed:
            return
        self._closed = True
        self._stop_ticker()
        task = self._activation_task
        self._activation_task = None
        if task is not None and not task.done():
            task.cancel()

    async def aclose(self) -> None:
        pending = [
            t for t in (self._tick_task, self._activation_task) if t is not None and not t.done()
        ]
        self.close()
        pending = [t for t in pending if t is not _current_task()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def __aenter__(self) -> "RestTimerController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _evaluate(self) -> None:
        outcome = transitions.advance(
            self._state,
            self._clock.now(),
            self._config.alert_checkpoints,
            default_rest_seconds=self._config.default_rest_seconds,
            auto_complete=self._config.auto_complete_on_threshold,
            alert_grace_seconds=self._config.alert_grace_seconds,
        )
        # State is committed before any callback runs, so a re-entrant
        # tick from inside a callback sees the completed phase
        self._state = outcome.state
        for checkpoint in outcome.alerts:
            self._emit_alert(checkpoint)
        if outcome.completed:
            self._stop_ticker()
            logger.debug("Rest timer completed at %ds", self._state.elapsed_seconds)
            self._emit_complete()

    def _emit_alert(self, checkpoint: int) -> None:
        if self._on_alert is None or self._closed:
            return
        try:
            self._on_alert(checkpoint)
        except Exception:
            logger.exception("on_alert callback raised at %ds", checkpoint)

    def _emit_complete(self) -> None:
        if self._on_complete is None or self._closed:
            return
        try:
            self._on_complete()
        except Exception:
            logger.exception("on_complete callback raised")

    def _start_ticker(self) -> None:
        if self._tick_task is not None and not self._tick_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; tick() must be driven by the caller")
            return
        self._tick_task = loop.create_task(self._run_ticker())

    def _stop_ticker(self) -> None:
        task = self._tick_task
        self._tick_task = None
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

    async def _run_ticker(self) -> None:
        me = _current_task()
        while not self._closed and self._state.phase == TimerPhase.RUNNING:
            await asyncio.sleep(self._next_tick_delay())
            if self._closed or self._state.phase != TimerPhase.RUNNING:
                break
            if self._tick_task is not me:
                # Replaced by a newer ticker after a reset/start from a callback
                break
            self.tick()

    def _next_tick_delay(self) -> float:
        interval = self._config.tick_interval_seconds
        raw = self._state.raw_elapsed(self._clock.now())
        return interval - (raw % interval) + _TICK_EPSILON_S

    def _target(self) -> int:
        return self._state.target_seconds(self._config.default_rest_seconds)

    def _error_kind(self) -> ErrorKind | None:
        if self._last_error is None:
            return None
        return getattr(self._last_error, "kind", ErrorKind.UNAVAILABLE)

    def _ensure_open(self) -> None:
        if self._closed:
            raise TimerClosedError("Rest timer controller is closed")


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
