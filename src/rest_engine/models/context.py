"""Rule context — frozen snapshot of every input for one rest calculation."""

from __future__ import annotations

from dataclasses import dataclass, field

from rest_engine.models.calculation import RestAdjustment
from rest_engine.models.enums import DifficultyClass
from rest_engine.models.history import HistoricalProfile
from rest_engine.models.performance import PerformanceInput
from rest_engine.models.tuning import RestTuning


@dataclass(frozen=True)
class RuleContext:
    """What an adjustment rule may look at.

    ``applied`` holds the adjustments made by rules that ran earlier, so a
    later rule (personalization) can compare against the population value.
    """

    user_id: str
    exercise_id: str
    performance: PerformanceInput
    difficulty: DifficultyClass
    base_rest_seconds: int
    tuning: RestTuning
    profile: HistoricalProfile | None = None
    applied: tuple[RestAdjustment, ...] = field(default_factory=tuple)

    @property
    def perceived_effort(self) -> int | None:
        return self.performance.perceived_effort

    @property
    def set_number(self) -> int:
        return self.performance.set_number
