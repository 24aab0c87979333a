"""Per-set performance input — immutable record supplied after each set."""

from __future__ import annotations

from dataclasses import dataclass

from rest_engine.exceptions import InvalidInputError
from rest_engine.models.enums import RPE_MAX, RPE_MIN


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PerformanceInput:
    """What the user just did on one set.

    Validated on construction so an invalid record never reaches a rule.
    """

    set_number: int
    reps_completed: int
    weight_kg: float | None = None
    perceived_effort: int | None = None  # RPE 1-10

    def __post_init__(self) -> None:
        if not _is_int(self.set_number) or self.set_number < 1:
            raise InvalidInputError(
                f"set_number must be a positive integer, got {self.set_number!r}"
            )
        if not _is_int(self.reps_completed) or self.reps_completed < 0:
            raise InvalidInputError(
                f"reps_completed must be a non-negative integer, got {self.reps_completed!r}"
            )
        if self.weight_kg is not None:
            if isinstance(self.weight_kg, bool) or not isinstance(self.weight_kg, (int, float)):
                raise InvalidInputError(f"weight_kg must be a number, got {self.weight_kg!r}")
            if self.weight_kg < 0:
                raise InvalidInputError(f"weight_kg must be non-negative, got {self.weight_kg}")
        if self.perceived_effort is not None:
            if (
                not _is_int(self.perceived_effort)
                or not RPE_MIN <= self.perceived_effort <= RPE_MAX
            ):
                raise InvalidInputError(
                    f"perceived_effort must be an integer {RPE_MIN}-{RPE_MAX}, "
                    f"got {self.perceived_effort!r}"
                )

    @property
    def volume_kg(self) -> float:
        """Set volume (reps x load); 0 for bodyweight or unloaded sets."""
        if self.weight_kg is None:
            return 0.0
        return self.reps_completed * self.weight_kg
