"""Utility helpers bridging the Streamlit UI and the rest engine.

Pure functions for formatting, synthetic history generation, and engine
construction.
"""

from __future__ import annotations

import random
from typing import Any, Optional

from history_client import InMemoryHistoryProvider, StaticExerciseCatalogue
from rest_engine.config import CATALOGUE_PATH, load_tuning
from rest_engine.engine import RestEngine
from rest_engine.models.calculation import AdaptiveRestCalculation
from rest_engine.models.enums import AdjustmentReason, DifficultyClass
from rest_engine.models.performance import PerformanceInput

DEMO_USER_ID = "demo-user"

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_clock(seconds: float) -> str:
    """Seconds to 'M:SS'. e.g. 95 -> '1:35'. Negative input shows '0:00'."""
    total = max(0, int(seconds))
    return f"{total // 60}:{total % 60:02d}"


def format_delta(seconds: int) -> str:
    """Signed seconds. e.g. 24 -> '+24s', -15 -> '-15s', 0 -> '±0s'."""
    if seconds == 0:
        return "±0s"
    return f"{seconds:+d}s"


def confidence_label(confidence: float) -> str:
    if confidence >= 0.75:
        return "High"
    if confidence >= 0.45:
        return "Medium"
    return "Low"


# ---------------------------------------------------------------------------
# Labels & color maps
# ---------------------------------------------------------------------------

ADJUSTMENT_LABELS: dict[AdjustmentReason, str] = {
    AdjustmentReason.RPE: "Effort (RPE)",
    AdjustmentReason.FATIGUE: "Set fatigue",
    AdjustmentReason.PERSONALIZATION: "Your pattern",
    AdjustmentReason.CLAMP: "Bounds",
}

ADJUSTMENT_COLORS: dict[AdjustmentReason, str] = {
    AdjustmentReason.RPE: "#E74C3C",              # red
    AdjustmentReason.FATIGUE: "#F5B041",          # amber
    AdjustmentReason.PERSONALIZATION: "#3498DB",  # blue
    AdjustmentReason.CLAMP: "#D5DBDB",            # grey
}

DIFFICULTY_LABELS: dict[DifficultyClass, str] = {
    DifficultyClass.ENDURANCE: "Endurance",
    DifficultyClass.ISOLATION: "Isolation",
    DifficultyClass.COMPOUND: "Compound",
    DifficultyClass.HEAVY_COMPOUND: "Heavy compound",
}


def breakdown_rows(calculation: AdaptiveRestCalculation) -> list[dict[str, Any]]:
    """Table rows: base, each adjustment in order, then the total."""
    rows: list[dict[str, Any]] = [
        {"Step": "Base", "Change": f"{calculation.base_rest_seconds}s", "Why": ""}
    ]
    for adjustment in calculation.adjustments:
        rows.append(
            {
                "Step": ADJUSTMENT_LABELS.get(adjustment.reason, adjustment.reason.value),
                "Change": format_delta(adjustment.delta_seconds),
                "Why": adjustment.explanation,
            }
        )
    rows.append(
        {
            "Step": "Recommended",
            "Change": format_clock(calculation.recommended_rest_seconds),
            "Why": calculation.reasoning,
        }
    )
    return rows


def checkpoint_schedule(
    recommended_seconds: int, checkpoints: list[int] | tuple[int, ...] | frozenset[int]
) -> list[dict[str, Any]]:
    """Alert checkpoints that fall inside the rest interval, in order."""
    rows = []
    for checkpoint in sorted(checkpoints):
        if checkpoint > recommended_seconds:
            continue
        rows.append(
            {
                "At": format_clock(checkpoint),
                "Remaining": format_clock(recommended_seconds - checkpoint),
                "Progress": f"{checkpoint / recommended_seconds:.0%}",
            }
        )
    return rows


# ---------------------------------------------------------------------------
# Input construction
# ---------------------------------------------------------------------------


def build_performance_input(
    set_number: int,
    reps_completed: int,
    weight_kg: float = 0.0,
    rpe: Optional[int] = None,
) -> PerformanceInput:
    """PerformanceInput from sidebar values; 0 kg means bodyweight."""
    return PerformanceInput(
        set_number=int(set_number),
        reps_completed=int(reps_completed),
        weight_kg=float(weight_kg) if weight_kg else None,
        perceived_effort=int(rpe) if rpe is not None else None,
    )


def generate_set_logs(
    sessions: int = 6,
    sets_per_session: int = 4,
    mean_rest_seconds: float = 110.0,
    spread_seconds: float = 10.0,
    drift_per_session: float = 0.0,
    seed: int = 42,
) -> list[dict[str, Any]]:
    """Synthetic rest logs, oldest first, with RPE rising across each session."""
    rng = random.Random(seed)
    rows: list[dict[str, Any]] = []
    for s in range(sessions):
        session_mean = mean_rest_seconds + drift_per_session * s
        for set_index in range(sets_per_session):
            rpe = min(10, 6 + set_index + rng.choice((0, 0, 1)))
            rest = max(15.0, rng.gauss(session_mean + (rpe - 7) * 8, spread_seconds))
            rows.append(
                {
                    "rest_seconds": round(rest, 1),
                    "rpe": rpe,
                    "session_id": f"session-{s + 1}",
                }
            )
    return rows


def build_catalogue() -> StaticExerciseCatalogue:
    """Catalogue from REST_CATALOGUE_PATH when set, else the built-in defaults."""
    if CATALOGUE_PATH is not None:
        return StaticExerciseCatalogue.from_json(CATALOGUE_PATH)
    return StaticExerciseCatalogue.with_defaults()


def build_engine(
    exercise_id: str,
    set_logs: Optional[list[dict[str, Any]]] = None,
    catalogue: Optional[StaticExerciseCatalogue] = None,
) -> RestEngine:
    """Engine over an in-memory history holding *set_logs* for the demo user."""
    history = InMemoryHistoryProvider(
        {(DEMO_USER_ID, exercise_id): set_logs} if set_logs else None
    )
    return RestEngine(catalogue or build_catalogue(), history, tuning=load_tuning())
