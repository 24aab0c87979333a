"""Rest timer: a drift-free, pausable countdown driven by the rest engine."""

from rest_timer.clock import Clock, MonotonicClock
from rest_timer.config import TimerConfig, load_timer_config
from rest_timer.context import SetContext
from rest_timer.controller import RestTimerController, fallback_calculation
from rest_timer.exceptions import InvalidTransitionError, RestTimerError, TimerClosedError
from rest_timer.state import TimerPhase, TimerSnapshot, TimerState

__all__ = [
    "Clock",
    "InvalidTransitionError",
    "MonotonicClock",
    "RestTimerController",
    "RestTimerError",
    "SetContext",
    "TimerClosedError",
    "TimerConfig",
    "TimerPhase",
    "TimerSnapshot",
    "TimerState",
    "fallback_calculation",
    "load_timer_config",
]
