"""Enumerations and tunable constants for the adaptive rest engine.

Rest defaults follow common resistance-training guidance; where a value is
a product decision rather than a published figure it is marked as such.
"""

from enum import Enum, IntEnum, auto


class DifficultyClass(IntEnum):
    """Exercise difficulty classification supplied by the exercise catalogue.

    Ordered from lightest to heaviest systemic demand.
    """

    ENDURANCE = auto()
    ISOLATION = auto()
    COMPOUND = auto()
    HEAVY_COMPOUND = auto()


class AdjustmentReason(str, Enum):
    """Why a rest adjustment was applied. Values are stable for display/logging."""

    RPE = "rpe"
    FATIGUE = "fatigue"
    PERSONALIZATION = "personalization"
    CLAMP = "clamp"


class RestTrend(str, Enum):
    """Direction of a user's rest durations across recent sessions."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# ---------------------------------------------------------------------------
# Base rest by difficulty class (seconds)
# Schoenfeld et al. (2016), J Strength Cond Res 30(7):1805-1812:
# multi-joint lifts benefit from >=2 min, isolation work tolerates 60-90 s.
# ---------------------------------------------------------------------------
BASE_REST_SECONDS: dict[DifficultyClass, int] = {
    DifficultyClass.ENDURANCE: 45,
    DifficultyClass.ISOLATION: 75,
    DifficultyClass.COMPOUND: 120,
    DifficultyClass.HEAVY_COMPOUND: 180,
}

# Hard bounds on any recommendation
REST_FLOOR_SECONDS = 15
REST_CEILING_SECONDS = 300

# Used by the timer when no calculation is available (product decision)
DEFAULT_REST_SECONDS = 90

# ---------------------------------------------------------------------------
# RPE bands — Helms et al. (2016), Strength Cond J 38(4):42-49
# (upper RPE bound of the band, multiplier applied to base rest)
# ---------------------------------------------------------------------------
RPE_MIN = 1
RPE_MAX = 10
RPE_MULTIPLIER_BANDS: tuple[tuple[int, float], ...] = (
    (6, 0.8),    # easy: -20%
    (8, 1.0),    # moderate: base
    (9, 1.2),    # hard: +20%
    (10, 1.4),   # maximal: +40%
)

# ---------------------------------------------------------------------------
# Fatigue accumulation across sets of the same exercise
# ---------------------------------------------------------------------------
FATIGUE_STEP_PER_SET = 0.05          # +5% of base per set after the first
FATIGUE_MAX_FRACTION = 0.30          # Never more than +30% of base
FATIGUE_HIGH_RPE_THRESHOLD = 9       # At/above this RPE fatigue builds faster
FATIGUE_HIGH_RPE_ACCELERATION = 1.15

# ---------------------------------------------------------------------------
# Personalization / confidence
# ---------------------------------------------------------------------------
CONFIDENCE_NO_HISTORY = 0.4          # History collaborator answered "not found"
CONFIDENCE_DEGRADED = 0.25           # History collaborator unreachable
CONFIDENCE_FALLBACK = 0.0            # Timer-side fixed default

HISTORY_FULL_CONFIDENCE_SAMPLES = 20  # Sample-count confidence plateaus here
HISTORY_SAMPLE_WEIGHT = 0.7
HISTORY_CONSISTENCY_WEIGHT = 0.3
DEFAULT_CONSISTENCY_SCORE = 50.0      # 0-100, used when the profile has none

MAX_PERSONALIZATION_WEIGHT = 0.5      # Sparse history can never dominate
REST_VARIANCE_SCALE_SECONDS = 60.0    # Std dev at which personalization vanishes

# ---------------------------------------------------------------------------
# History aggregation
# ---------------------------------------------------------------------------
HISTORY_EWMA_SPAN = 10               # Recent sets dominate preferred rest
PROFILE_SMOOTHING_OLD_WEIGHT = 0.8   # 80% old / 20% new per finished session
REST_TREND_TOLERANCE_S_PER_SESSION = 2.0

# Request timeout for the history collaborator (seconds)
HISTORY_TIMEOUT_S = 2.0
