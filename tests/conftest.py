"""Shared test fixtures: fake clock, catalogues, history providers, set inputs."""

from __future__ import annotations

import asyncio

import pytest

from history_client.catalogue import StaticExerciseCatalogue
from rest_engine.engine import RestEngine
from rest_engine.exceptions import UnavailableError
from rest_engine.models.enums import DifficultyClass
from rest_engine.models.history import HistoricalProfile
from rest_engine.models.performance import PerformanceInput


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds


class StaticHistory:
    """History provider returning a fixed profile (or None) and counting calls."""

    def __init__(self, profile: HistoricalProfile | None = None) -> None:
        self.profile = profile
        self.calls: list[tuple[str, str]] = []

    async def fetch_historical_profile(self, user_id, exercise_id):
        self.calls.append((user_id, exercise_id))
        return self.profile


class FailingHistory:
    """History provider that always raises *error*."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or UnavailableError("history store down")
        self.calls = 0

    async def fetch_historical_profile(self, user_id, exercise_id):
        self.calls += 1
        raise self.error


class SlowHistory:
    """History provider that never answers within any sane timeout."""

    async def fetch_historical_profile(self, user_id, exercise_id):
        await asyncio.sleep(60)
        return None


class AsyncCatalogue:
    """Catalogue whose lookup is a coroutine, as a remote catalogue would be."""

    def __init__(self, exercises: dict[str, DifficultyClass]) -> None:
        self._exercises = exercises

    async def get_difficulty_class(self, exercise_id):
        return self._exercises.get(exercise_id)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalogue() -> StaticExerciseCatalogue:
    return StaticExerciseCatalogue(
        {
            "back-squat": DifficultyClass.HEAVY_COMPOUND,
            "bench-press": DifficultyClass.COMPOUND,
            "bicep-curl": DifficultyClass.ISOLATION,
            "plank": DifficultyClass.ENDURANCE,
        }
    )


@pytest.fixture
def engine(catalogue) -> RestEngine:
    """Engine with no history collaborator at all."""
    return RestEngine(catalogue)


@pytest.fixture
def consistent_profile() -> HistoricalProfile:
    """40 sets, very regular habit: ~150 s after RPE 9 on bench press."""
    return HistoricalProfile(
        exercise_id="bench-press",
        sample_count=40,
        preferred_rest_seconds=130.0,
        rest_seconds_std=6.0,
        rpe_rest_seconds={8: 125.0, 9: 150.0},
        consistency_score=95.0,
        session_count=10,
    )


@pytest.fixture
def sparse_profile() -> HistoricalProfile:
    """Two logged sets with a very different habit (60 s)."""
    return HistoricalProfile(
        exercise_id="bench-press",
        sample_count=2,
        preferred_rest_seconds=60.0,
        rest_seconds_std=0.0,
        consistency_score=100.0,
        session_count=1,
    )


@pytest.fixture
def first_set_no_rpe() -> PerformanceInput:
    return PerformanceInput(set_number=1, reps_completed=10, weight_kg=50.0)


@pytest.fixture
def hard_third_set() -> PerformanceInput:
    """Set 3 at RPE 9."""
    return PerformanceInput(set_number=3, reps_completed=8, weight_kg=80.0, perceived_effort=9)
