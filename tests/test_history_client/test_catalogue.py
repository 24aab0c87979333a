"""Tests for history_client.catalogue."""

from __future__ import annotations

import json

import pytest

from history_client.catalogue import DEFAULT_EXERCISES, StaticExerciseCatalogue, parse_difficulty
from rest_engine.collaborators import ExerciseCatalogue
from rest_engine.exceptions import InvalidInputError, NotFoundError
from rest_engine.models.enums import DifficultyClass


class TestParseDifficulty:
    def test_passes_enum_through(self) -> None:
        assert parse_difficulty(DifficultyClass.COMPOUND) == DifficultyClass.COMPOUND

    @pytest.mark.parametrize("raw", ["heavy_compound", "HEAVY_COMPOUND", "heavy-compound", " Heavy_Compound "])
    def test_accepts_names(self, raw: str) -> None:
        assert parse_difficulty(raw) == DifficultyClass.HEAVY_COMPOUND

    def test_rejects_unknown(self) -> None:
        with pytest.raises(InvalidInputError):
            parse_difficulty("cardio")


class TestStaticExerciseCatalogue:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(StaticExerciseCatalogue(), ExerciseCatalogue)

    def test_defaults(self) -> None:
        catalogue = StaticExerciseCatalogue.with_defaults()
        assert len(catalogue) == len(DEFAULT_EXERCISES)
        assert catalogue.get_difficulty_class("back-squat") == DifficultyClass.HEAVY_COMPOUND
        assert catalogue.get_difficulty_class("bicep-curl") == DifficultyClass.ISOLATION
        assert "plank" in catalogue

    def test_unknown_exercise_raises(self) -> None:
        with pytest.raises(NotFoundError):
            StaticExerciseCatalogue().get_difficulty_class("bench-press")

    def test_register_by_name(self) -> None:
        catalogue = StaticExerciseCatalogue()
        catalogue.register("cable-fly", "isolation")
        assert catalogue.get_difficulty_class("cable-fly") == DifficultyClass.ISOLATION

    def test_register_rejects_empty_id(self) -> None:
        with pytest.raises(InvalidInputError):
            StaticExerciseCatalogue().register("", DifficultyClass.COMPOUND)

    def test_iterates_sorted_ids(self) -> None:
        catalogue = StaticExerciseCatalogue({"squat": "heavy_compound", "curl": "isolation"})
        assert list(catalogue) == ["curl", "squat"]
        assert catalogue.exercise_ids == ["curl", "squat"]


class TestFromJson:
    def test_nested_exercises_key(self, tmp_path) -> None:
        path = tmp_path / "catalogue.json"
        path.write_text(json.dumps({"exercises": {"squat": "heavy_compound", "curl": "isolation"}}))
        catalogue = StaticExerciseCatalogue.from_json(path)
        assert catalogue.get_difficulty_class("squat") == DifficultyClass.HEAVY_COMPOUND
        assert len(catalogue) == 2

    def test_flat_mapping(self, tmp_path) -> None:
        path = tmp_path / "catalogue.json"
        path.write_text(json.dumps({"plank": "endurance"}))
        catalogue = StaticExerciseCatalogue.from_json(str(path))
        assert catalogue.get_difficulty_class("plank") == DifficultyClass.ENDURANCE

    def test_rejects_non_object(self, tmp_path) -> None:
        path = tmp_path / "catalogue.json"
        path.write_text(json.dumps(["squat"]))
        with pytest.raises(InvalidInputError):
            StaticExerciseCatalogue.from_json(path)

    def test_rejects_unknown_class(self, tmp_path) -> None:
        path = tmp_path / "catalogue.json"
        path.write_text(json.dumps({"rowing": "cardio"}))
        with pytest.raises(InvalidInputError):
            StaticExerciseCatalogue.from_json(path)
