"""Abstract base class for all rest adjustment rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rest_engine.models.calculation import RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.enums import AdjustmentReason


class RestRule(ABC):
    """Base class for one step of the rest recommendation.

    Each rule encapsulates one adjustment to the base rest. Rules are
    held by a RuleRegistry and applied by the
    RestEngine in ascending ``order``; the resulting adjustment list keeps
    that order.

    Subclasses must define:
        rule_id: unique identifier (e.g. "rpe")
        version: semantic version string
        order: position in the adjustment sequence (lower runs first)
        reason: AdjustmentReason recorded on the produced adjustment
        required_data: RuleContext attribute names that must be present
        evaluate(): the rule's adjustment logic
    """

    rule_id: str
    version: str
    order: int
    reason: AdjustmentReason
    required_data: list[str]

    def has_required_data(self, context: RuleContext) -> bool:
        """Check that all required RuleContext attributes are not None."""
        for attr_name in self.required_data:
            if getattr(context, attr_name, None) is None:
                return False
        return True

    @abstractmethod
    def evaluate(self, context: RuleContext) -> RestAdjustment | None:
        """Return the adjustment this rule makes, or None to skip."""
        ...

    def _adjustment(self, delta_seconds: int, explanation: str) -> RestAdjustment:
        return RestAdjustment(
            reason=self.reason,
            delta_seconds=int(delta_seconds),
            explanation=explanation,
        )
