"""Exceptions raised by the rest timer."""

from __future__ import annotations


class RestTimerError(Exception):
    """Base exception for all rest_timer errors."""


class InvalidTransitionError(RestTimerError):
    """A control was used from a phase that does not allow it."""

    def __init__(self, action: str, phase: object) -> None:
        name = getattr(phase, "name", phase)
        super().__init__(f"Cannot {action} while {name}")
        self.action = action
        self.phase = phase


class TimerClosedError(RestTimerError):
    """The controller was closed; it no longer accepts controls."""
