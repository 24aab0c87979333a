"""RestEngine — turns one set's performance into an explained rest recommendation."""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging

from rest_engine.collaborators import ExerciseCatalogue, HistoryProvider
from rest_engine.exceptions import InvalidInputError, NotFoundError, UnavailableError
from rest_engine.math.recovery import base_rest_seconds, clamp_rest, history_confidence
from rest_engine.models.calculation import AdaptiveRestCalculation, RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.decision_trace import DecisionTrace, RuleResult, RuleStatus
from rest_engine.models.enums import AdjustmentReason, DifficultyClass
from rest_engine.models.history import HistoricalProfile
from rest_engine.models.performance import PerformanceInput
from rest_engine.models.tuning import RestTuning
from rest_engine.registry import RuleRegistry

logger = logging.getLogger(__name__)

# Errors from the history collaborator that degrade the calculation instead
# of failing it
_HISTORY_OUTAGE_ERRORS = (UnavailableError, OSError, TimeoutError, asyncio.TimeoutError)

HISTORY_FOUND = "profile"
HISTORY_NOT_FOUND = "not_found"
HISTORY_UNAVAILABLE = "unavailable"


class RestEngine:
    """Computes adaptive rest between sets.

    Holds no per-call state, so one instance can serve concurrent
    calculations for different exercises.

    Usage:
        engine = RestEngine(catalogue, history)
        calculation = await engine.calculate("user-1", "bench-press", PerformanceInput(3, 8, 80.0, 9))
        calculation, trace = await engine.calculate_with_trace(...)
    """

    def __init__(
        self,
        catalogue: ExerciseCatalogue,
        history: HistoryProvider | None = None,
        registry: RuleRegistry | None = None,
        tuning: RestTuning | None = None,
    ) -> None:
        self.catalogue = catalogue
        self.history = history
        self.registry = registry if registry is not None else RuleRegistry.default()
        self.tuning = tuning or RestTuning()

    async def calculate(
        self, user_id: str, exercise_id: str, performance: PerformanceInput
    ) -> AdaptiveRestCalculation:
        """Recommended rest for the set described by *performance*.

        Raises:
            InvalidInputError: empty identifiers or malformed input.
            NotFoundError: the catalogue does not know *exercise_id*.
        """
        calculation, _ = await self.calculate_with_trace(user_id, exercise_id, performance)
        return calculation

    async def calculate_with_trace(
        self, user_id: str, exercise_id: str, performance: PerformanceInput
    ) -> tuple[AdaptiveRestCalculation, DecisionTrace]:
        """Same as calculate(), plus the per-rule decision trace."""
        self._validate(user_id, exercise_id, performance)

        difficulty = await self._lookup_difficulty(exercise_id)
        base = base_rest_seconds(difficulty, self.tuning.base_rest_seconds)
        profile, history_status = await self._fetch_profile(user_id, exercise_id)

        context = RuleContext(
            user_id=user_id,
            exercise_id=exercise_id,
            performance=performance,
            difficulty=difficulty,
            base_rest_seconds=base,
            tuning=self.tuning,
            profile=profile,
        )
        adjustments, rule_results = self._apply_rules(context)

        raw_total = base + sum(a.delta_seconds for a in adjustments)
        recommended = clamp_rest(
            raw_total, self.tuning.floor_seconds, self.tuning.ceiling_seconds
        )
        notes = ""
        if recommended != raw_total:
            bound = "floor" if recommended > raw_total else "ceiling"
            adjustments.append(
                RestAdjustment(
                    reason=AdjustmentReason.CLAMP,
                    delta_seconds=recommended - raw_total,
                    explanation=f"{bound} {recommended}s",
                )
            )
            notes = f"Clamped {raw_total}s to {bound} {recommended}s."

        calculation = AdaptiveRestCalculation(
            recommended_rest_seconds=recommended,
            base_rest_seconds=base,
            adjustments=tuple(adjustments),
            confidence=self._confidence(profile, history_status),
            exercise_id=exercise_id,
            difficulty=difficulty,
            degraded=history_status == HISTORY_UNAVAILABLE,
        )
        logger.debug(
            "Rest for user=%s exercise=%s set=%d: %ds (confidence %.2f, history %s)",
            user_id,
            exercise_id,
            performance.set_number,
            recommended,
            calculation.confidence,
            history_status,
        )
        trace = DecisionTrace(
            rule_results=tuple(rule_results),
            calculation=calculation,
            history_status=history_status,
            notes=notes,
        )
        return calculation, trace

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(user_id: str, exercise_id: str, performance: PerformanceInput) -> None:
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidInputError("user_id must be a non-empty string")
        if not isinstance(exercise_id, str) or not exercise_id.strip():
            raise InvalidInputError("exercise_id must be a non-empty string")
        if not isinstance(performance, PerformanceInput):
            raise InvalidInputError(
                f"performance must be a PerformanceInput, got {type(performance).__name__}"
            )

    async def _lookup_difficulty(self, exercise_id: str) -> DifficultyClass:
        result = self.catalogue.get_difficulty_class(exercise_id)
        if inspect.isawaitable(result):
            result = await result
        if result is None:
            raise NotFoundError(f"Unknown exercise: {exercise_id}")
        if isinstance(result, DifficultyClass):
            return result
        try:
            return DifficultyClass[str(result).upper()]
        except KeyError as exc:
            raise NotFoundError(
                f"Exercise {exercise_id} has unknown difficulty class {result!r}"
            ) from exc

    async def _fetch_profile(
        self, user_id: str, exercise_id: str
    ) -> tuple[HistoricalProfile | None, str]:
        if self.history is None:
            return None, HISTORY_NOT_FOUND
        try:
            profile = await asyncio.wait_for(
                self.history.fetch_historical_profile(user_id, exercise_id),
                timeout=self.tuning.history_timeout_s,
            )
        except _HISTORY_OUTAGE_ERRORS as exc:
            logger.warning(
                "History unavailable for user=%s exercise=%s, skipping personalization: %s",
                user_id,
                exercise_id,
                str(exc) or type(exc).__name__,
            )
            return None, HISTORY_UNAVAILABLE
        if profile is None:
            return None, HISTORY_NOT_FOUND
        return profile, HISTORY_FOUND

    def _apply_rules(
        self, context: RuleContext
    ) -> tuple[list[RestAdjustment], list[RuleResult]]:
        adjustments: list[RestAdjustment] = []
        rule_results: list[RuleResult] = []

        for rule in self.registry:
            rule_context = _with_applied(context, adjustments)
            if not rule.has_required_data(rule_context):
                rule_results.append(
                    RuleResult(
                        rule_id=rule.rule_id,
                        status=RuleStatus.NOT_APPLICABLE,
                        explanation=f"Missing required data: {rule.required_data}",
                    )
                )
                continue

            adjustment = rule.evaluate(rule_context)
            if adjustment is None:
                rule_results.append(
                    RuleResult(
                        rule_id=rule.rule_id,
                        status=RuleStatus.SKIPPED,
                        explanation="Rule returned no adjustment.",
                    )
                )
                continue

            adjustments.append(adjustment)
            rule_results.append(
                RuleResult(
                    rule_id=rule.rule_id,
                    status=RuleStatus.FIRED,
                    adjustment=adjustment,
                    explanation=f"{adjustment.delta_seconds:+d}s ({adjustment.explanation})",
                )
            )
        return adjustments, rule_results

    def _confidence(self, profile: HistoricalProfile | None, history_status: str) -> float:
        tuning = self.tuning
        if history_status == HISTORY_UNAVAILABLE:
            return tuning.confidence_degraded
        if profile is None:
            return tuning.confidence_no_history
        hc = history_confidence(
            profile.sample_count,
            profile.consistency_score,
            full_confidence_samples=tuning.full_confidence_samples,
            sample_weight=tuning.sample_weight,
            consistency_weight=tuning.consistency_weight,
            default_consistency=tuning.default_consistency_score,
        )
        base = tuning.confidence_no_history
        return round(base + (1.0 - base) * hc, 3)


def _with_applied(context: RuleContext, adjustments: list[RestAdjustment]) -> RuleContext:
    return dataclasses.replace(context, applied=tuple(adjustments))
