"""Pure functions mapping raw history records to HistoricalProfile.

No I/O — takes set-log rows or stored per-exercise metric rows (as plain
dicts, the shape a history store returns) and builds the read-only
profile the rest engine consumes.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from rest_engine.math.recovery import (
    calculate_rest_ewma,
    calculate_rest_std,
    classify_rest_trend,
    consistency_score,
    smooth_preferred_rest,
)
from rest_engine.models.enums import RPE_MAX, RPE_MIN, RestTrend
from rest_engine.models.history import HistoricalProfile

SET_LOG_COLUMNS = ("rest_seconds", "rpe", "session_id", "completed_at")


def build_profile(
    exercise_id: str, set_logs: Iterable[Mapping[str, Any]]
) -> Optional[HistoricalProfile]:
    """Aggregate per-set rest logs (oldest first) into a HistoricalProfile.

    Each row needs ``rest_seconds``; ``rpe``, ``session_id`` and
    ``completed_at`` are optional. Rows without a positive rest are
    ignored. Returns None when nothing usable remains.
    """
    df = pd.DataFrame(list(set_logs), columns=list(SET_LOG_COLUMNS))
    if df.empty:
        return None

    df["rest_seconds"] = pd.to_numeric(df["rest_seconds"], errors="coerce")
    df = df[df["rest_seconds"] > 0]
    if df.empty:
        return None

    if df["completed_at"].notna().all():
        df = df.assign(_ts=pd.to_datetime(df["completed_at"], errors="coerce"))
        if df["_ts"].notna().all():
            df = df.sort_values("_ts", kind="stable")

    rests = df["rest_seconds"].astype(float).tolist()

    rpe = pd.to_numeric(df["rpe"], errors="coerce")
    valid_rpe = rpe.between(RPE_MIN, RPE_MAX)
    rated = df[valid_rpe].assign(rpe=rpe[valid_rpe].round().astype(int))
    rpe_rest = {
        int(k): round(float(v), 1)
        for k, v in rated.groupby("rpe")["rest_seconds"].mean().items()
    }
    average_rpe = round(float(rpe[valid_rpe].mean()), 1) if valid_rpe.any() else None

    sessions = df["session_id"].fillna("__unsessioned__")
    session_means = df.groupby(sessions, sort=False)["rest_seconds"].mean().tolist()
    session_count = int(df["session_id"].nunique())

    return HistoricalProfile(
        exercise_id=exercise_id,
        sample_count=len(rests),
        preferred_rest_seconds=round(calculate_rest_ewma(rests), 1),
        rest_seconds_std=round(calculate_rest_std(rests), 1),
        rpe_rest_seconds=rpe_rest,
        consistency_score=consistency_score(rests),
        rest_trend=classify_rest_trend(session_means),
        average_rpe=average_rpe,
        session_count=session_count,
    )


def map_profile(raw: Optional[Mapping[str, Any]]) -> Optional[HistoricalProfile]:
    """Map a stored per-exercise metrics row to a HistoricalProfile.

    Expected keys: exercise_id, preferred_rest_seconds, rest_seconds_variance
    (spread in seconds), total_sets, total_sessions, consistency_score
    (0-100), rest_time_trend, average_rpe, rpe_rest_seconds. Values may be
    None or numeric strings. Returns None when there is no usable
    preferred rest.
    """
    if not raw:
        return None
    preferred = _extract_float(raw.get("preferred_rest_seconds"))
    if preferred is None or preferred <= 0:
        return None

    sample_count = _extract_int(raw.get("total_sets"))
    if sample_count is None:
        sample_count = _extract_int(raw.get("total_sessions")) or 0

    return HistoricalProfile(
        exercise_id=str(raw.get("exercise_id") or ""),
        sample_count=sample_count,
        preferred_rest_seconds=preferred,
        rest_seconds_std=_extract_float(raw.get("rest_seconds_variance")) or 0.0,
        rpe_rest_seconds=_extract_rpe_table(raw.get("rpe_rest_seconds")),
        consistency_score=_extract_float(raw.get("consistency_score")),
        rest_trend=_extract_trend(raw.get("rest_time_trend")),
        average_rpe=_extract_float(raw.get("average_rpe")),
        session_count=_extract_int(raw.get("total_sessions")) or 0,
    )


def update_profile(
    profile: Optional[HistoricalProfile],
    exercise_id: str,
    sets_completed: int,
    average_rest_seconds: Optional[float] = None,
    average_rpe: Optional[float] = None,
) -> Optional[HistoricalProfile]:
    """Fold one finished session into a profile (80% old / 20% new rest).

    A user's first session creates the profile from that session alone.
    Returns the previous profile unchanged (or None) when the session
    carries no rest information and there is nothing to start from.
    """
    if profile is None:
        if average_rest_seconds is None or average_rest_seconds <= 0:
            return None
        return HistoricalProfile(
            exercise_id=exercise_id,
            sample_count=max(0, sets_completed),
            preferred_rest_seconds=float(average_rest_seconds),
            average_rpe=average_rpe,
            session_count=1,
        )

    preferred = smooth_preferred_rest(profile.preferred_rest_seconds, average_rest_seconds)
    return dataclasses.replace(
        profile,
        sample_count=profile.sample_count + max(0, sets_completed),
        preferred_rest_seconds=round(preferred, 1),
        average_rpe=average_rpe if average_rpe is not None else profile.average_rpe,
        session_count=profile.session_count + 1,
    )


# ---------------------------------------------------------------------------
# Internal extractors — each handles None input gracefully
# ---------------------------------------------------------------------------


def _extract_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _extract_int(value: Any) -> Optional[int]:
    number = _extract_float(value)
    return int(number) if number is not None else None


def _extract_trend(value: Any) -> RestTrend:
    try:
        return RestTrend(str(value).lower())
    except ValueError:
        return RestTrend.STABLE


def _extract_rpe_table(value: Any) -> dict[int, float]:
    if not isinstance(value, Mapping):
        return {}
    table: dict[int, float] = {}
    for key, rest in value.items():
        rpe = _extract_int(key)
        seconds = _extract_float(rest)
        if rpe is None or seconds is None or not RPE_MIN <= rpe <= RPE_MAX:
            continue
        table[rpe] = seconds
    return table
