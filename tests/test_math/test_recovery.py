"""Tests for rest_engine.math.recovery."""

from __future__ import annotations

import pytest

from rest_engine.math.recovery import (
    base_rest_seconds,
    calculate_rest_ewma,
    calculate_rest_std,
    clamp_rest,
    classify_rest_trend,
    consistency_score,
    fatigue_fraction,
    history_confidence,
    personalization_weight,
    rpe_multiplier,
    smooth_preferred_rest,
    variance_penalty,
)
from rest_engine.models.enums import DifficultyClass, RestTrend


class TestBaseRest:
    def test_defaults_by_class(self) -> None:
        assert base_rest_seconds(DifficultyClass.ENDURANCE) == 45
        assert base_rest_seconds(DifficultyClass.ISOLATION) == 75
        assert base_rest_seconds(DifficultyClass.COMPOUND) == 120
        assert base_rest_seconds(DifficultyClass.HEAVY_COMPOUND) == 180

    def test_custom_table(self) -> None:
        table = {d: 60 for d in DifficultyClass}
        assert base_rest_seconds(DifficultyClass.HEAVY_COMPOUND, table) == 60


class TestRPEMultiplier:
    @pytest.mark.parametrize(
        "rpe,expected",
        [(1, 0.8), (6, 0.8), (7, 1.0), (8, 1.0), (9, 1.2), (10, 1.4)],
    )
    def test_bands(self, rpe: int, expected: float) -> None:
        assert rpe_multiplier(rpe) == pytest.approx(expected)

    def test_none_is_neutral(self) -> None:
        assert rpe_multiplier(None) == 1.0

    def test_monotonic(self) -> None:
        values = [rpe_multiplier(r) for r in range(1, 11)]
        assert values == sorted(values)


class TestFatigueFraction:
    def test_first_set_is_zero(self) -> None:
        assert fatigue_fraction(1) == 0.0

    def test_linear_growth(self) -> None:
        assert fatigue_fraction(3) == pytest.approx(0.10)
        assert fatigue_fraction(5) == pytest.approx(0.20)

    def test_cap(self) -> None:
        assert fatigue_fraction(100) == pytest.approx(0.30)

    def test_high_rpe_acceleration(self) -> None:
        assert fatigue_fraction(3, rpe=9) == pytest.approx(0.115)
        assert fatigue_fraction(3, rpe=8) == pytest.approx(0.10)

    def test_custom_step_and_cap(self) -> None:
        assert fatigue_fraction(4, step=0.1, cap=0.25) == pytest.approx(0.25)


class TestHistoryConfidence:
    def test_no_samples_is_zero(self) -> None:
        assert history_confidence(0, 100.0) == 0.0

    def test_full_history(self) -> None:
        assert history_confidence(20, 100.0) == pytest.approx(1.0)

    def test_plateaus_at_full_sample_count(self) -> None:
        assert history_confidence(200, 80.0) == pytest.approx(history_confidence(20, 80.0))

    def test_grows_with_samples(self) -> None:
        assert history_confidence(5, 80.0) < history_confidence(10, 80.0)

    def test_missing_consistency_uses_default(self) -> None:
        # 0.7 * 0.5 + 0.3 * 0.5
        assert history_confidence(10, None) == pytest.approx(0.5)

    def test_out_of_range_consistency_is_clipped(self) -> None:
        assert history_confidence(20, 250.0) == pytest.approx(1.0)


class TestPersonalizationWeight:
    def test_variance_penalty(self) -> None:
        assert variance_penalty(0.0) == 1.0
        assert variance_penalty(30.0) == pytest.approx(0.5)
        assert variance_penalty(120.0) == 0.0

    def test_zero_scale_disables_penalty(self) -> None:
        assert variance_penalty(30.0, scale_seconds=0) == 1.0

    def test_weight_is_capped(self) -> None:
        assert personalization_weight(1.0, 0.0) == pytest.approx(0.5)

    def test_weight_below_cap(self) -> None:
        assert personalization_weight(0.4, 30.0) == pytest.approx(0.2)


class TestClamp:
    def test_within_bounds(self) -> None:
        assert clamp_rest(120.4, 15, 300) == 120

    def test_floor(self) -> None:
        assert clamp_rest(3, 15, 300) == 15

    def test_ceiling(self) -> None:
        assert clamp_rest(999, 15, 300) == 300


class TestRestEWMA:
    def test_empty(self) -> None:
        assert calculate_rest_ewma([]) == 0.0

    def test_constant_series(self) -> None:
        assert calculate_rest_ewma([90.0] * 8) == pytest.approx(90.0)

    def test_weights_recent_samples(self) -> None:
        value = calculate_rest_ewma([60.0] * 10 + [120.0] * 3)
        assert 60.0 < value < 120.0
        assert value > calculate_rest_ewma([120.0] * 3 + [60.0] * 10)


class TestRestSpread:
    def test_std_needs_two_samples(self) -> None:
        assert calculate_rest_std([90.0]) == 0.0

    def test_std(self) -> None:
        assert calculate_rest_std([80.0, 100.0]) == pytest.approx(10.0)

    def test_consistency_needs_two_samples(self) -> None:
        assert consistency_score([90.0]) is None

    def test_perfectly_consistent(self) -> None:
        assert consistency_score([90.0, 90.0, 90.0]) == 100.0

    def test_consistency_falls_with_spread(self) -> None:
        # CV = 10 / 90
        assert consistency_score([80.0, 100.0]) == pytest.approx(88.9)
        assert consistency_score([30.0, 150.0]) < consistency_score([80.0, 100.0])


class TestRestTrend:
    def test_too_few_sessions_is_stable(self) -> None:
        assert classify_rest_trend([60.0, 120.0]) == RestTrend.STABLE

    def test_increasing(self) -> None:
        assert classify_rest_trend([90.0, 100.0, 110.0, 120.0]) == RestTrend.INCREASING

    def test_decreasing(self) -> None:
        assert classify_rest_trend([120.0, 110.0, 100.0]) == RestTrend.DECREASING

    def test_small_drift_is_stable(self) -> None:
        assert classify_rest_trend([100.0, 101.0, 100.0, 101.0]) == RestTrend.STABLE


class TestSmoothPreferredRest:
    def test_eighty_twenty(self) -> None:
        assert smooth_preferred_rest(100.0, 150.0) == pytest.approx(110.0)

    def test_no_session_average_keeps_previous(self) -> None:
        assert smooth_preferred_rest(100.0, None) == 100.0
