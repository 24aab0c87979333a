"""Interfaces the engine needs from the rest of the application.

Persistence, identity and the exercise catalogue live elsewhere; the
engine only sees these two narrow capabilities.
"""

from __future__ import annotations

from typing import Awaitable, Protocol, Union, runtime_checkable

from rest_engine.models.enums import DifficultyClass
from rest_engine.models.history import HistoricalProfile


@runtime_checkable
class HistoryProvider(Protocol):
    """Read-only access to aggregated set history.

    Returns None when the user has no history for the exercise. May raise
    ``UnavailableError`` (or a network ``OSError``/``TimeoutError``) when the
    backing store cannot be reached.
    """

    async def fetch_historical_profile(
        self, user_id: str, exercise_id: str
    ) -> HistoricalProfile | None:
        ...


@runtime_checkable
class ExerciseCatalogue(Protocol):
    """Difficulty lookup for exercises; sync or async.

    Must raise ``NotFoundError`` (or return None) for an unknown exercise.
    """

    def get_difficulty_class(
        self, exercise_id: str
    ) -> Union[DifficultyClass, None, Awaitable[DifficultyClass | None]]:
        ...
