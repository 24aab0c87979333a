"""Tests for RPERule — effort-scaled rest."""

from __future__ import annotations

from rest_engine.models.context import RuleContext
from rest_engine.models.enums import AdjustmentReason, DifficultyClass
from rest_engine.models.performance import PerformanceInput
from rest_engine.models.tuning import RestTuning
from rest_engine.rules.rpe import RPERule


class TestRPERule:
    def setup_method(self) -> None:
        self.rule = RPERule()

    def _make_context(self, rpe: int | None, base: int = 120) -> RuleContext:
        return RuleContext(
            user_id="user-1",
            exercise_id="bench-press",
            performance=PerformanceInput(set_number=2, reps_completed=8, perceived_effort=rpe),
            difficulty=DifficultyClass.COMPOUND,
            base_rest_seconds=base,
            tuning=RestTuning(),
        )

    def test_runs_first(self) -> None:
        assert self.rule.order == 10
        assert self.rule.reason == AdjustmentReason.RPE

    def test_requires_rpe(self) -> None:
        assert self.rule.has_required_data(self._make_context(None)) is False
        assert self.rule.has_required_data(self._make_context(7)) is True

    def test_easy_set_shortens_rest(self) -> None:
        adjustment = self.rule.evaluate(self._make_context(5))
        assert adjustment.delta_seconds == -24
        assert adjustment.explanation == "RPE 5"

    def test_moderate_set_keeps_base(self) -> None:
        assert self.rule.evaluate(self._make_context(7)).delta_seconds == 0
        assert self.rule.evaluate(self._make_context(8)).delta_seconds == 0

    def test_hard_set_lengthens_rest(self) -> None:
        assert self.rule.evaluate(self._make_context(9)).delta_seconds == 24

    def test_maximal_set_lengthens_most(self) -> None:
        assert self.rule.evaluate(self._make_context(10)).delta_seconds == 48

    def test_scales_with_base(self) -> None:
        # 180 s heavy compound at RPE 10 -> +40%
        assert self.rule.evaluate(self._make_context(10, base=180)).delta_seconds == 72

    def test_custom_bands(self) -> None:
        ctx = RuleContext(
            user_id="user-1",
            exercise_id="bench-press",
            performance=PerformanceInput(2, 8, perceived_effort=9),
            difficulty=DifficultyClass.COMPOUND,
            base_rest_seconds=100,
            tuning=RestTuning(rpe_multiplier_bands=((8, 1.0), (10, 1.5))),
        )
        assert self.rule.evaluate(ctx).delta_seconds == 50
