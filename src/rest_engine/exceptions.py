"""Exception hierarchy for the adaptive rest engine.

Every error carries an ``ErrorKind`` so callers can branch on the category
without importing each subclass.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INVALID_INPUT = "invalid_input"


class RestEngineError(Exception):
    """Base exception for all rest_engine errors."""

    kind: ErrorKind


class NotFoundError(RestEngineError):
    """Unknown exercise or user. Surfaced to the caller, never defaulted."""

    kind = ErrorKind.NOT_FOUND


class UnavailableError(RestEngineError):
    """A collaborator (history store, catalogue service) could not be reached."""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, message: str, attempts: int | None = None) -> None:
        super().__init__(message)
        self.attempts = attempts


class InvalidInputError(RestEngineError, ValueError):
    """Performance data or configuration failed validation."""

    kind = ErrorKind.INVALID_INPUT
