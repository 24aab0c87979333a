"""Tunable coefficient set for the rest engine.

Defaults come from the constants in ``models.enums``; an engine may be
constructed with a different set (see ``rest_engine.config.load_tuning``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from rest_engine.exceptions import InvalidInputError
from rest_engine.models.enums import (
    BASE_REST_SECONDS,
    CONFIDENCE_DEGRADED,
    CONFIDENCE_NO_HISTORY,
    DEFAULT_CONSISTENCY_SCORE,
    FATIGUE_HIGH_RPE_ACCELERATION,
    FATIGUE_HIGH_RPE_THRESHOLD,
    FATIGUE_MAX_FRACTION,
    FATIGUE_STEP_PER_SET,
    HISTORY_CONSISTENCY_WEIGHT,
    HISTORY_FULL_CONFIDENCE_SAMPLES,
    HISTORY_SAMPLE_WEIGHT,
    HISTORY_TIMEOUT_S,
    MAX_PERSONALIZATION_WEIGHT,
    REST_CEILING_SECONDS,
    REST_FLOOR_SECONDS,
    REST_VARIANCE_SCALE_SECONDS,
    RPE_MULTIPLIER_BANDS,
    DifficultyClass,
)


@dataclass(frozen=True)
class RestTuning:
    """Coefficients shaping every adjustment. Only the shapes are fixed:
    RPE and fatigue are monotonic, fatigue is capped, personalization is
    confidence-weighted and capped."""

    base_rest_seconds: Mapping[DifficultyClass, int] = field(
        default_factory=lambda: dict(BASE_REST_SECONDS)
    )
    floor_seconds: int = REST_FLOOR_SECONDS
    ceiling_seconds: int = REST_CEILING_SECONDS

    rpe_multiplier_bands: tuple[tuple[int, float], ...] = RPE_MULTIPLIER_BANDS

    fatigue_step_per_set: float = FATIGUE_STEP_PER_SET
    fatigue_max_fraction: float = FATIGUE_MAX_FRACTION
    fatigue_high_rpe_threshold: int = FATIGUE_HIGH_RPE_THRESHOLD
    fatigue_high_rpe_acceleration: float = FATIGUE_HIGH_RPE_ACCELERATION

    confidence_no_history: float = CONFIDENCE_NO_HISTORY
    confidence_degraded: float = CONFIDENCE_DEGRADED
    full_confidence_samples: int = HISTORY_FULL_CONFIDENCE_SAMPLES
    sample_weight: float = HISTORY_SAMPLE_WEIGHT
    consistency_weight: float = HISTORY_CONSISTENCY_WEIGHT
    default_consistency_score: float = DEFAULT_CONSISTENCY_SCORE
    max_personalization_weight: float = MAX_PERSONALIZATION_WEIGHT
    variance_scale_seconds: float = REST_VARIANCE_SCALE_SECONDS

    history_timeout_s: float = HISTORY_TIMEOUT_S

    def __post_init__(self) -> None:
        if self.floor_seconds < 1:
            raise InvalidInputError("floor_seconds must be positive")
        if self.ceiling_seconds < self.floor_seconds:
            raise InvalidInputError("ceiling_seconds must be >= floor_seconds")
        if not 0.0 <= self.max_personalization_weight <= 1.0:
            raise InvalidInputError("max_personalization_weight must be within [0, 1]")
        multipliers = [m for _, m in self.rpe_multiplier_bands]
        if multipliers != sorted(multipliers):
            raise InvalidInputError("rpe_multiplier_bands must be non-decreasing")
        missing = set(DifficultyClass) - set(self.base_rest_seconds)
        if missing:
            names = ", ".join(sorted(d.name for d in missing))
            raise InvalidInputError(f"base_rest_seconds missing classes: {names}")
        object.__setattr__(
            self, "base_rest_seconds", MappingProxyType(dict(self.base_rest_seconds))
        )
