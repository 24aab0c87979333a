"""Ordered set of rest rules the engine applies, keyed by rule_id."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from rest_engine.exceptions import InvalidInputError
from rest_engine.rules.base import RestRule
from rest_engine.rules.fatigue import FatigueRule
from rest_engine.rules.personalization import PersonalizationRule
from rest_engine.rules.rpe import RPERule

logger = logging.getLogger(__name__)

# Adjustment steps of a standard recommendation; application order comes
# from each rule's ``order``, not from this tuple.
DEFAULT_RULE_TYPES: tuple[type[RestRule], ...] = (RPERule, FatigueRule, PersonalizationRule)


class RuleRegistry:
    """Holds the rules for one engine and hands them out in application order.

    Rules run by ascending ``order`` with ``rule_id`` breaking ties. A
    rule_id can be held by one rule only; registering a second rule under
    the same id raises InvalidInputError.
    """

    def __init__(self, rules: Iterable[RestRule] = ()) -> None:
        self._rules: dict[str, RestRule] = {}
        for rule in rules:
            self.register(rule)

    @classmethod
    def default(cls) -> RuleRegistry:
        """Registry holding the RPE, fatigue and personalization steps."""
        return cls(rule_type() for rule_type in DEFAULT_RULE_TYPES)

    def register(self, rule: RestRule) -> None:
        if not isinstance(rule, RestRule):
            raise InvalidInputError(f"expected a RestRule, got {type(rule).__name__}")
        existing = self._rules.get(rule.rule_id)
        if existing is not None:
            raise InvalidInputError(
                f"rule id {rule.rule_id!r} is already held by {type(existing).__name__}"
            )
        self._rules[rule.rule_id] = rule
        logger.debug("Registered rule %s v%s at order %d", rule.rule_id, rule.version, rule.order)

    def unregister(self, rule_id: str) -> RestRule | None:
        """Remove and return the rule under *rule_id*, if any."""
        return self._rules.pop(rule_id, None)

    def get(self, rule_id: str) -> RestRule | None:
        return self._rules.get(rule_id)

    def ordered(self) -> list[RestRule]:
        return sorted(self._rules.values(), key=lambda r: (r.order, r.rule_id))

    @property
    def rule_ids(self) -> list[str]:
        """Rule ids in application order."""
        return [rule.rule_id for rule in self.ordered()]

    def __iter__(self) -> Iterator[RestRule]:
        return iter(self.ordered())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules
