"""RPE rule: harder sets earn longer rest.

Reference:
    Helms et al. (2016). Application of the repetitions in reserve-based
    RPE scale for resistance training. Strength Cond J 38(4):42-49.
"""

from __future__ import annotations

from rest_engine.math.recovery import rpe_multiplier
from rest_engine.models.calculation import RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.enums import AdjustmentReason
from rest_engine.rules.base import RestRule


class RPERule(RestRule):
    """Scales base rest by the RPE band of the set just completed.

    Only fires when an RPE was reported; a missing RPE is not replaced by
    a default value.
    """

    rule_id = "rpe"
    version = "1.0.0"
    order = 10
    reason = AdjustmentReason.RPE
    required_data = ["perceived_effort"]

    def evaluate(self, context: RuleContext) -> RestAdjustment | None:
        rpe = context.perceived_effort
        multiplier = rpe_multiplier(rpe, context.tuning.rpe_multiplier_bands)
        delta = round(context.base_rest_seconds * (multiplier - 1.0))
        return self._adjustment(delta, f"RPE {rpe}")
