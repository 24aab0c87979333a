"""Personalization rule: lean toward how this user actually recovers.

The population value is base + RPE adjustment. The user's observed rest
pulls the recommendation toward their habit, weighted by how much the
history can be trusted and capped so sparse data cannot take over. The
observed rest is the longest logged at or below the current RPE (see
HistoricalProfile.rest_target_for), so a harder set never gets a shorter
target than an easier one.
"""

from __future__ import annotations

from rest_engine.math.recovery import history_confidence, personalization_weight
from rest_engine.models.calculation import RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.enums import AdjustmentReason
from rest_engine.rules.base import RestRule


class PersonalizationRule(RestRule):
    """Shifts rest toward the user's historical pattern for this exercise."""

    rule_id = "personalization"
    version = "1.0.0"
    order = 30
    reason = AdjustmentReason.PERSONALIZATION
    required_data = ["profile"]

    def evaluate(self, context: RuleContext) -> RestAdjustment | None:
        # required_data check guarantees the profile is present
        profile = context.profile
        tuning = context.tuning
        if profile is None or profile.sample_count <= 0:
            return None

        observed, source_rpe = profile.rest_target_for(context.perceived_effort)
        basis = "your usual rest" if source_rpe is None else f"your RPE {source_rpe} pattern"
        if observed is None or observed <= 0:
            return None

        rpe_delta = sum(
            a.delta_seconds for a in context.applied if a.reason == AdjustmentReason.RPE
        )
        population = context.base_rest_seconds + rpe_delta

        confidence = history_confidence(
            profile.sample_count,
            profile.consistency_score,
            full_confidence_samples=tuning.full_confidence_samples,
            sample_weight=tuning.sample_weight,
            consistency_weight=tuning.consistency_weight,
            default_consistency=tuning.default_consistency_score,
        )
        weight = personalization_weight(
            confidence,
            profile.rest_seconds_std,
            cap=tuning.max_personalization_weight,
            scale_seconds=tuning.variance_scale_seconds,
        )
        delta = round((observed - population) * weight)
        return self._adjustment(delta, basis)
