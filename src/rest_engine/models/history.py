"""Historical profile — read-only aggregate of a user's past sets on one exercise."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from rest_engine.models.enums import RestTrend


@dataclass(frozen=True)
class HistoricalProfile:
    """Aggregated view owned by the history collaborator.

    The engine only reads it. ``rpe_rest_seconds`` maps an RPE value to the
    mean rest the user actually took after sets at that effort.
    """

    exercise_id: str
    sample_count: int
    preferred_rest_seconds: float
    rest_seconds_std: float = 0.0
    rpe_rest_seconds: Mapping[int, float] = field(default_factory=dict)
    consistency_score: float | None = None  # 0-100
    rest_trend: RestTrend = RestTrend.STABLE
    average_rpe: float | None = None
    session_count: int = 0

    def __post_init__(self) -> None:
        # Freeze the mapping so the profile stays read-only for every rule
        object.__setattr__(
            self, "rpe_rest_seconds", MappingProxyType(dict(self.rpe_rest_seconds))
        )

    def rest_target_for(self, rpe: int | None) -> tuple[float, int | None]:
        """Rest the user settles on at *rpe*, and the RPE it was observed at.

        Takes the longest observed rest at or below *rpe*, so the target
        never shrinks as effort rises. Below the lowest logged RPE (or with
        no RPE) the preferred rest is used, capped by that lowest entry.
        The second element is None when the preferred rest was used.
        """
        preferred = self.preferred_rest_seconds
        if rpe is None or not self.rpe_rest_seconds:
            return preferred, None
        seen = [(seconds, r) for r, seconds in self.rpe_rest_seconds.items() if r <= rpe]
        if not seen:
            lowest = self.rpe_rest_seconds[min(self.rpe_rest_seconds)]
            return min(preferred, lowest), None
        seconds, source = max(seen)
        return seconds, source
