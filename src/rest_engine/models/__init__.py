"""Data models for the rest engine."""

from rest_engine.models.calculation import AdaptiveRestCalculation, RestAdjustment
from rest_engine.models.context import RuleContext
from rest_engine.models.decision_trace import DecisionTrace, RuleResult, RuleStatus
from rest_engine.models.enums import AdjustmentReason, DifficultyClass, RestTrend
from rest_engine.models.history import HistoricalProfile
from rest_engine.models.performance import PerformanceInput
from rest_engine.models.tuning import RestTuning

__all__ = [
    "AdaptiveRestCalculation",
    "AdjustmentReason",
    "DecisionTrace",
    "DifficultyClass",
    "HistoricalProfile",
    "PerformanceInput",
    "RestAdjustment",
    "RestTrend",
    "RestTuning",
    "RuleContext",
    "RuleResult",
    "RuleStatus",
]
