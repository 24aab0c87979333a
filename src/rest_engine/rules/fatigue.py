"""Fatigue rule: rest grows with each set of the same exercise, up to a cap."""

from __future__ import annotations

from rest_engine.math.recovery import fatigue_fraction
from rest_engine.models.calculation import RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.enums import AdjustmentReason
from rest_engine.rules.base import RestRule


class FatigueRule(RestRule):
    rule_id = "fatigue"
    version = "1.0.0"
    order = 20
    reason = AdjustmentReason.FATIGUE
    required_data = ["set_number"]

    def evaluate(self, context: RuleContext) -> RestAdjustment | None:
        tuning = context.tuning
        fraction = fatigue_fraction(
            context.set_number,
            context.perceived_effort,
            step=tuning.fatigue_step_per_set,
            cap=tuning.fatigue_max_fraction,
            high_rpe_threshold=tuning.fatigue_high_rpe_threshold,
            high_rpe_acceleration=tuning.fatigue_high_rpe_acceleration,
        )
        delta = round(context.base_rest_seconds * fraction)
        return self._adjustment(delta, f"set {context.set_number}")
