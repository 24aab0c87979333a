"""In-memory exercise catalogue: exercise id -> difficulty class."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, Mapping, Union

from rest_engine.exceptions import InvalidInputError, NotFoundError
from rest_engine.models.enums import DifficultyClass

logger = logging.getLogger(__name__)

DifficultyLike = Union[DifficultyClass, str]

# Common movements, used by the dashboard and as a starting catalogue
DEFAULT_EXERCISES: dict[str, DifficultyClass] = {
    "back-squat": DifficultyClass.HEAVY_COMPOUND,
    "deadlift": DifficultyClass.HEAVY_COMPOUND,
    "bench-press": DifficultyClass.COMPOUND,
    "overhead-press": DifficultyClass.COMPOUND,
    "barbell-row": DifficultyClass.COMPOUND,
    "pull-up": DifficultyClass.COMPOUND,
    "lunge": DifficultyClass.COMPOUND,
    "bicep-curl": DifficultyClass.ISOLATION,
    "tricep-extension": DifficultyClass.ISOLATION,
    "lateral-raise": DifficultyClass.ISOLATION,
    "leg-extension": DifficultyClass.ISOLATION,
    "plank": DifficultyClass.ENDURANCE,
    "push-up": DifficultyClass.ENDURANCE,
    "jumping-jack": DifficultyClass.ENDURANCE,
}


def parse_difficulty(value: DifficultyLike) -> DifficultyClass:
    """Accept a DifficultyClass or its name in any case ("compound")."""
    if isinstance(value, DifficultyClass):
        return value
    try:
        return DifficultyClass[str(value).strip().upper().replace("-", "_")]
    except KeyError as exc:
        raise InvalidInputError(f"Unknown difficulty class: {value!r}") from exc


class StaticExerciseCatalogue:
    """Synchronous catalogue backed by a dict."""

    def __init__(self, exercises: Mapping[str, DifficultyLike] | None = None) -> None:
        self._exercises: dict[str, DifficultyClass] = {}
        for exercise_id, difficulty in (exercises or {}).items():
            self.register(exercise_id, difficulty)

    @classmethod
    def with_defaults(cls) -> "StaticExerciseCatalogue":
        return cls(DEFAULT_EXERCISES)

    @classmethod
    def from_json(cls, path: Path | str) -> "StaticExerciseCatalogue":
        """Load ``{"exercises": {"id": "compound", ...}}`` or a flat mapping."""
        with open(path) as f:
            data = json.load(f)
        exercises = data.get("exercises", data) if isinstance(data, dict) else None
        if not isinstance(exercises, dict):
            raise InvalidInputError(f"Catalogue file {path} must contain a JSON object")
        catalogue = cls(exercises)
        logger.info("Loaded %d exercises from %s", len(catalogue), path)
        return catalogue

    def register(self, exercise_id: str, difficulty: DifficultyLike) -> None:
        if not exercise_id:
            raise InvalidInputError("exercise_id must be non-empty")
        self._exercises[exercise_id] = parse_difficulty(difficulty)

    def get_difficulty_class(self, exercise_id: str) -> DifficultyClass:
        try:
            return self._exercises[exercise_id]
        except KeyError:
            raise NotFoundError(f"Unknown exercise: {exercise_id}") from None

    @property
    def exercise_ids(self) -> list[str]:
        return sorted(self._exercises)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._exercises

    def __iter__(self) -> Iterator[str]:
        return iter(self.exercise_ids)

    def __len__(self) -> int:
        return len(self._exercises)
