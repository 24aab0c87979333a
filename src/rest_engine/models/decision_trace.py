"""Decision trace — audit trail of how the engine reached its recommendation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto

from rest_engine.models.calculation import AdaptiveRestCalculation, RestAdjustment


class RuleStatus(IntEnum):
    """Whether an adjustment rule fired, was skipped, or was not applicable."""

    FIRED = auto()
    SKIPPED = auto()
    NOT_APPLICABLE = auto()


@dataclass(frozen=True)
class RuleResult:
    """Record of a single adjustment rule's evaluation during one calculation."""

    rule_id: str
    status: RuleStatus
    adjustment: RestAdjustment | None = None
    explanation: str = ""


@dataclass(frozen=True)
class DecisionTrace:
    """Complete audit trail for a single RestEngine.calculate() call."""

    rule_results: tuple[RuleResult, ...] = field(default_factory=tuple)
    calculation: AdaptiveRestCalculation | None = None
    history_status: str = ""  # "profile", "not_found", "unavailable"
    notes: str = ""

    def result_for(self, rule_id: str) -> RuleResult | None:
        for result in self.rule_results:
            if result.rule_id == rule_id:
                return result
        return None
