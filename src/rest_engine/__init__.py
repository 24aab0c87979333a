"""Adaptive rest engine: explained rest recommendations between sets."""

from rest_engine.engine import RestEngine
from rest_engine.exceptions import (
    ErrorKind,
    InvalidInputError,
    NotFoundError,
    RestEngineError,
    UnavailableError,
)
from rest_engine.models import (
    AdaptiveRestCalculation,
    AdjustmentReason,
    DifficultyClass,
    HistoricalProfile,
    PerformanceInput,
    RestAdjustment,
    RestTuning,
)

__all__ = [
    "AdaptiveRestCalculation",
    "AdjustmentReason",
    "DifficultyClass",
    "ErrorKind",
    "HistoricalProfile",
    "InvalidInputError",
    "NotFoundError",
    "PerformanceInput",
    "RestAdjustment",
    "RestEngine",
    "RestEngineError",
    "RestTuning",
    "UnavailableError",
]
