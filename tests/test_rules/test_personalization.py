"""Tests for PersonalizationRule — confidence-weighted pull toward the user's habit."""

from __future__ import annotations

import dataclasses

from rest_engine.models.calculation import RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.enums import AdjustmentReason, DifficultyClass
from rest_engine.models.history import HistoricalProfile
from rest_engine.models.performance import PerformanceInput
from rest_engine.models.tuning import RestTuning
from rest_engine.rules.personalization import PersonalizationRule


class TestPersonalizationRule:
    def setup_method(self) -> None:
        self.rule = PersonalizationRule()

    def _make_context(
        self,
        profile: HistoricalProfile | None,
        rpe: int | None = 9,
        rpe_delta: int = 0,
        tuning: RestTuning | None = None,
    ) -> RuleContext:
        applied = ()
        if rpe_delta:
            applied = (RestAdjustment(AdjustmentReason.RPE, rpe_delta, f"RPE {rpe}"),)
        return RuleContext(
            user_id="user-1",
            exercise_id="bench-press",
            performance=PerformanceInput(set_number=2, reps_completed=8, perceived_effort=rpe),
            difficulty=DifficultyClass.COMPOUND,
            base_rest_seconds=120,
            tuning=tuning or RestTuning(),
            profile=profile,
            applied=applied,
        )

    def _profile(self, **overrides) -> HistoricalProfile:
        fields = dict(
            exercise_id="bench-press",
            sample_count=40,
            preferred_rest_seconds=180.0,
            rest_seconds_std=0.0,
            consistency_score=100.0,
        )
        fields.update(overrides)
        return HistoricalProfile(**fields)

    def test_runs_last(self) -> None:
        assert self.rule.order == 30
        assert self.rule.reason == AdjustmentReason.PERSONALIZATION

    def test_requires_profile(self) -> None:
        assert self.rule.has_required_data(self._make_context(None)) is False
        assert self.rule.has_required_data(self._make_context(self._profile())) is True

    def test_weight_capped_at_half_the_gap(self) -> None:
        # Full confidence, zero variance -> weight capped at 0.5
        adjustment = self.rule.evaluate(self._make_context(self._profile()))
        assert adjustment.delta_seconds == 30
        assert adjustment.explanation == "your usual rest"

    def test_compares_against_population_including_rpe(self) -> None:
        # population = 120 + 24 = 144; habit 180 -> +18
        adjustment = self.rule.evaluate(self._make_context(self._profile(), rpe_delta=24))
        assert adjustment.delta_seconds == 18

    def test_population_ignores_earlier_fatigue(self) -> None:
        # Only base + RPE is the population value, not the running total
        context = self._make_context(self._profile(), rpe_delta=24)
        fatigue = RestAdjustment(AdjustmentReason.FATIGUE, 14, "set 3")
        with_fatigue = dataclasses.replace(context, applied=context.applied + (fatigue,))
        assert self.rule.evaluate(with_fatigue).delta_seconds == 18

    def test_prefers_rpe_specific_pattern(self) -> None:
        profile = self._profile(rpe_rest_seconds={9: 100.0})
        adjustment = self.rule.evaluate(self._make_context(profile))
        assert adjustment.delta_seconds == -10
        assert adjustment.explanation == "your RPE 9 pattern"

    def test_harder_set_keeps_longer_easier_pattern(self) -> None:
        # Rested 240 s after RPE 8 but only 100 s after RPE 9
        profile = self._profile(preferred_rest_seconds=120.0, rpe_rest_seconds={8: 240.0, 9: 100.0})
        at_eight = self.rule.evaluate(self._make_context(profile, rpe=8))
        at_nine = self.rule.evaluate(self._make_context(profile, rpe=9, rpe_delta=24))
        assert at_eight.delta_seconds == 60
        assert at_nine.delta_seconds == 48
        assert at_nine.explanation == "your RPE 8 pattern"
        assert 120 + 24 + at_nine.delta_seconds >= 120 + at_eight.delta_seconds

    def test_below_lowest_logged_rpe_uses_smaller_of_habits(self) -> None:
        profile = self._profile(preferred_rest_seconds=180.0, rpe_rest_seconds={8: 140.0})
        adjustment = self.rule.evaluate(self._make_context(profile, rpe=6))
        assert adjustment.delta_seconds == 10
        assert adjustment.explanation == "your usual rest"

    def test_falls_back_to_preferred_without_rpe(self) -> None:
        profile = self._profile(rpe_rest_seconds={9: 100.0})
        adjustment = self.rule.evaluate(self._make_context(profile, rpe=None))
        assert adjustment.delta_seconds == 30

    def test_sparse_history_weighs_less(self) -> None:
        rich = self.rule.evaluate(self._make_context(self._profile(sample_count=40)))
        sparse = self.rule.evaluate(self._make_context(self._profile(sample_count=2)))
        assert 0 < sparse.delta_seconds < rich.delta_seconds

    def test_erratic_history_weighs_less(self) -> None:
        steady = self.rule.evaluate(self._make_context(self._profile(rest_seconds_std=0.0)))
        erratic = self.rule.evaluate(self._make_context(self._profile(rest_seconds_std=45.0)))
        assert erratic.delta_seconds < steady.delta_seconds

    def test_very_erratic_history_is_ignored(self) -> None:
        adjustment = self.rule.evaluate(self._make_context(self._profile(rest_seconds_std=90.0)))
        assert adjustment.delta_seconds == 0

    def test_empty_profile_skips(self) -> None:
        assert self.rule.evaluate(self._make_context(self._profile(sample_count=0))) is None

    def test_weight_cap_is_tunable(self) -> None:
        tuning = RestTuning(max_personalization_weight=0.25)
        adjustment = self.rule.evaluate(self._make_context(self._profile(), tuning=tuning))
        assert adjustment.delta_seconds == 15
