"""Rest and recovery calculations: base rest, RPE and fatigue scaling,
history confidence, personalization weighting, and history aggregation.

References:
    - Schoenfeld et al. (2016): rest interval length and multi-joint lifts
    - Helms et al. (2016): RPE-based autoregulation
    - Williams et al. (2017): EWMA for recency-weighted averages
"""

from __future__ import annotations

import math
from typing import Mapping, Sequence

import numpy as np
import pandas as pd

from rest_engine.models.enums import (
    BASE_REST_SECONDS,
    DEFAULT_CONSISTENCY_SCORE,
    FATIGUE_HIGH_RPE_ACCELERATION,
    FATIGUE_HIGH_RPE_THRESHOLD,
    FATIGUE_MAX_FRACTION,
    FATIGUE_STEP_PER_SET,
    HISTORY_CONSISTENCY_WEIGHT,
    HISTORY_EWMA_SPAN,
    HISTORY_FULL_CONFIDENCE_SAMPLES,
    HISTORY_SAMPLE_WEIGHT,
    MAX_PERSONALIZATION_WEIGHT,
    PROFILE_SMOOTHING_OLD_WEIGHT,
    REST_TREND_TOLERANCE_S_PER_SESSION,
    REST_VARIANCE_SCALE_SECONDS,
    RPE_MULTIPLIER_BANDS,
    DifficultyClass,
    RestTrend,
)


def base_rest_seconds(
    difficulty: DifficultyClass,
    table: Mapping[DifficultyClass, int] = BASE_REST_SECONDS,
) -> int:
    """Starting rest for an exercise of the given difficulty class."""
    return int(table[difficulty])


def rpe_multiplier(
    rpe: int | None,
    bands: Sequence[tuple[int, float]] = RPE_MULTIPLIER_BANDS,
) -> float:
    """Multiplier on base rest for a set at *rpe*.

    Bands are ``(upper_rpe, multiplier)`` pairs in ascending order; the
    first band whose upper bound covers *rpe* wins. No RPE means no change.

    Reference:
        Helms et al. (2016). Application of the repetitions in reserve-based
        RPE scale for resistance training. Strength Cond J 38(4):42-49.
    """
    if rpe is None:
        return 1.0
    for upper, multiplier in bands:
        if rpe <= upper:
            return multiplier
    return bands[-1][1]


def fatigue_fraction(
    set_number: int,
    rpe: int | None = None,
    step: float = FATIGUE_STEP_PER_SET,
    cap: float = FATIGUE_MAX_FRACTION,
    high_rpe_threshold: int = FATIGUE_HIGH_RPE_THRESHOLD,
    high_rpe_acceleration: float = FATIGUE_HIGH_RPE_ACCELERATION,
) -> float:
    """Extra rest, as a fraction of base, owed to sets already done.

    Grows linearly from 0 on the first set and is capped so a long
    session cannot push rest without bound. Near-maximal sets accelerate
    accumulation.
    """
    fraction = max(0, set_number - 1) * step
    if rpe is not None and rpe >= high_rpe_threshold:
        fraction *= high_rpe_acceleration
    return min(fraction, cap)


def history_confidence(
    sample_count: int,
    consistency_score: float | None,
    full_confidence_samples: int = HISTORY_FULL_CONFIDENCE_SAMPLES,
    sample_weight: float = HISTORY_SAMPLE_WEIGHT,
    consistency_weight: float = HISTORY_CONSISTENCY_WEIGHT,
    default_consistency: float = DEFAULT_CONSISTENCY_SCORE,
) -> float:
    """How much a user's history can be trusted, in [0, 1].

    More samples raise confidence until it plateaus at
    ``full_confidence_samples``; consistent rest habits add a smaller bonus.
    """
    if sample_count <= 0:
        return 0.0
    sample_part = min(sample_count / full_confidence_samples, 1.0)
    consistency = default_consistency if consistency_score is None else consistency_score
    consistency_part = min(max(consistency / 100.0, 0.0), 1.0)
    return _unit(sample_weight * sample_part + consistency_weight * consistency_part)


def variance_penalty(
    rest_std_seconds: float,
    scale_seconds: float = REST_VARIANCE_SCALE_SECONDS,
) -> float:
    """1.0 for perfectly regular rest, falling to 0 at ``scale_seconds`` std dev."""
    if scale_seconds <= 0:
        return 1.0
    return max(0.0, 1.0 - rest_std_seconds / scale_seconds)


def personalization_weight(
    confidence: float,
    rest_std_seconds: float,
    cap: float = MAX_PERSONALIZATION_WEIGHT,
    scale_seconds: float = REST_VARIANCE_SCALE_SECONDS,
) -> float:
    """Share of the gap between population and user pattern to close."""
    return min(confidence * variance_penalty(rest_std_seconds, scale_seconds), cap)


def clamp_rest(seconds: float, floor: int, ceiling: int) -> int:
    """Round and clamp a rest duration into ``[floor, ceiling]``."""
    return int(min(max(round(seconds), floor), ceiling))


# ---------------------------------------------------------------------------
# History aggregation (used when building a HistoricalProfile)
# ---------------------------------------------------------------------------


def calculate_rest_ewma(
    rest_seconds: Sequence[float], span: int = HISTORY_EWMA_SPAN
) -> float:
    """Recency-weighted mean rest (oldest first). 0.0 for no samples.

    Reference:
        Williams et al. (2017). J Sci Med Sport 20(5):493-497.
    """
    if len(rest_seconds) == 0:
        return 0.0
    series = pd.Series(list(rest_seconds), dtype=np.float64)
    return float(series.ewm(span=span, adjust=False).mean().iloc[-1])


def calculate_rest_std(rest_seconds: Sequence[float]) -> float:
    """Population standard deviation of rest samples; 0.0 below two samples."""
    if len(rest_seconds) < 2:
        return 0.0
    return float(np.std(np.asarray(rest_seconds, dtype=np.float64), ddof=0))


def consistency_score(rest_seconds: Sequence[float]) -> float | None:
    """0-100 score from the coefficient of variation of rest samples.

    A CV of 0 scores 100; a CV of 1 or more scores 0.
    """
    if len(rest_seconds) < 2:
        return None
    values = np.asarray(rest_seconds, dtype=np.float64)
    mean = float(np.mean(values))
    if mean <= 0:
        return None
    cv = float(np.std(values, ddof=0)) / mean
    return round(max(0.0, 1.0 - cv) * 100.0, 1)


def classify_rest_trend(
    session_means: Sequence[float],
    tolerance: float = REST_TREND_TOLERANCE_S_PER_SESSION,
) -> RestTrend:
    """Slope of per-session mean rest (oldest first) as a trend label."""
    if len(session_means) < 3:
        return RestTrend.STABLE
    x = np.arange(len(session_means), dtype=np.float64)
    slope = float(np.polyfit(x, np.asarray(session_means, dtype=np.float64), 1)[0])
    if slope > tolerance:
        return RestTrend.INCREASING
    if slope < -tolerance:
        return RestTrend.DECREASING
    return RestTrend.STABLE


def smooth_preferred_rest(
    previous: float,
    session_average: float | None,
    old_weight: float = PROFILE_SMOOTHING_OLD_WEIGHT,
) -> float:
    """Exponentially smoothed preferred rest after a finished session."""
    if session_average is None:
        return previous
    return previous * old_weight + session_average * (1.0 - old_weight)


def _unit(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)
