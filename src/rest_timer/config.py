"""Caller-facing timer options."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from rest_engine import config as env
from rest_engine.exceptions import InvalidInputError
from rest_engine.models.enums import DEFAULT_REST_SECONDS


@dataclass(frozen=True)
class TimerConfig:
    """Options for one RestTimerController.

    alert_checkpoints: seconds from start at which ``on_alert`` fires;
        empty means no mid-timer alerts.
    auto_complete_on_threshold: complete automatically once elapsed reaches
        the recommendation; when False the timer runs on until skip/reset.
    """

    alert_checkpoints: frozenset[int] = field(default_factory=frozenset)
    auto_complete_on_threshold: bool = True
    tick_interval_seconds: float = 1.0
    default_rest_seconds: int = DEFAULT_REST_SECONDS

    def __post_init__(self) -> None:
        checkpoints = frozenset(self.alert_checkpoints)
        for checkpoint in checkpoints:
            if isinstance(checkpoint, bool) or not isinstance(checkpoint, int) or checkpoint < 1:
                raise InvalidInputError(
                    f"alert checkpoints must be positive integers, got {checkpoint!r}"
                )
        object.__setattr__(self, "alert_checkpoints", checkpoints)
        if self.tick_interval_seconds <= 0:
            raise InvalidInputError("tick_interval_seconds must be positive")
        if self.default_rest_seconds < 1:
            raise InvalidInputError("default_rest_seconds must be positive")

    @property
    def alert_grace_seconds(self) -> int:
        """How late (in whole seconds) a checkpoint may still be announced.

        Covers one late tick; anything later is a suspension and the alert
        is dropped rather than replayed.
        """
        return max(1, math.ceil(self.tick_interval_seconds))


def load_timer_config(alert_checkpoints: Iterable[int] | None = None) -> TimerConfig:
    """TimerConfig with the environment overrides applied."""
    checkpoints = (
        frozenset(alert_checkpoints)
        if alert_checkpoints is not None
        else env.parse_checkpoints(env.TIMER_ALERT_CHECKPOINTS)
    )
    return TimerConfig(
        alert_checkpoints=checkpoints,
        tick_interval_seconds=env.TIMER_TICK_INTERVAL,
        default_rest_seconds=env.TIMER_DEFAULT_SECONDS,
    )
