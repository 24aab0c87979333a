"""Engine output — an explained rest recommendation."""

from __future__ import annotations

from dataclasses import dataclass, field

from rest_engine.models.enums import AdjustmentReason, DifficultyClass


@dataclass(frozen=True)
class RestAdjustment:
    """One signed change to the base rest, in the order it was applied."""

    reason: AdjustmentReason
    delta_seconds: int
    explanation: str = ""


@dataclass(frozen=True)
class AdaptiveRestCalculation:
    """Recommended rest plus the factors that produced it.

    Invariant: ``recommended_rest_seconds == base_rest_seconds +
    sum(a.delta_seconds for a in adjustments)``. Clamping to the floor or
    ceiling is recorded as its own CLAMP adjustment so the sum always holds.
    Instances are never mutated; a recalculation supersedes them.
    """

    recommended_rest_seconds: int
    base_rest_seconds: int
    adjustments: tuple[RestAdjustment, ...] = field(default_factory=tuple)
    confidence: float = 0.0  # 0.0-1.0

    exercise_id: str | None = None
    difficulty: DifficultyClass | None = None
    degraded: bool = False  # History was unreachable or the engine failed

    @property
    def total_adjustment_seconds(self) -> int:
        return sum(a.delta_seconds for a in self.adjustments)

    def adjustment_for(self, reason: AdjustmentReason) -> RestAdjustment | None:
        """First adjustment recorded for *reason*, if any."""
        for adjustment in self.adjustments:
            if adjustment.reason == reason:
                return adjustment
        return None

    @property
    def reasoning(self) -> str:
        """Short human-readable breakdown, e.g. 'Base: 120s · +24s (RPE 9)'."""
        parts = [f"Base: {self.base_rest_seconds}s"]
        for adjustment in self.adjustments:
            if adjustment.delta_seconds == 0:
                continue
            label = adjustment.explanation or adjustment.reason.value
            parts.append(f"{adjustment.delta_seconds:+d}s ({label})")
        if self.degraded:
            parts.append("history unavailable")
        return " · ".join(parts)
