"""Set context — what a rest interval is for."""

from __future__ import annotations

from dataclasses import dataclass

from rest_engine.models.performance import PerformanceInput


@dataclass(frozen=True)
class SetContext:
    """Identity and performance of the set the user is resting after."""

    user_id: str
    exercise_id: str
    performance: PerformanceInput

    @property
    def key(self) -> tuple[str, str, int, int | None]:
        """Fields whose change requires a new recommendation."""
        return (
            self.user_id,
            self.exercise_id,
            self.performance.set_number,
            self.performance.perceived_effort,
        )
