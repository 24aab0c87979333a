"""Tests for PerformanceInput validation."""

from __future__ import annotations

import dataclasses

import pytest

from rest_engine.exceptions import ErrorKind, InvalidInputError
from rest_engine.models.performance import PerformanceInput


class TestPerformanceInput:
    def test_valid_minimal(self) -> None:
        perf = PerformanceInput(set_number=1, reps_completed=0)
        assert perf.weight_kg is None
        assert perf.perceived_effort is None

    def test_frozen(self) -> None:
        perf = PerformanceInput(1, 10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            perf.set_number = 2  # type: ignore[misc]

    @pytest.mark.parametrize("set_number", [0, -1, 1.5, True])
    def test_rejects_bad_set_number(self, set_number) -> None:
        with pytest.raises(InvalidInputError):
            PerformanceInput(set_number=set_number, reps_completed=5)

    def test_rejects_negative_reps(self) -> None:
        with pytest.raises(InvalidInputError):
            PerformanceInput(set_number=1, reps_completed=-1)

    def test_rejects_negative_weight(self) -> None:
        with pytest.raises(InvalidInputError):
            PerformanceInput(set_number=1, reps_completed=5, weight_kg=-2.5)

    def test_rejects_non_numeric_weight(self) -> None:
        with pytest.raises(InvalidInputError):
            PerformanceInput(set_number=1, reps_completed=5, weight_kg="heavy")

    @pytest.mark.parametrize("rpe", [0, 11, 7.5, False])
    def test_rejects_bad_rpe(self, rpe) -> None:
        with pytest.raises(InvalidInputError):
            PerformanceInput(set_number=1, reps_completed=5, perceived_effort=rpe)

    @pytest.mark.parametrize("rpe", [1, 10])
    def test_accepts_rpe_bounds(self, rpe: int) -> None:
        assert PerformanceInput(1, 5, perceived_effort=rpe).perceived_effort == rpe

    def test_invalid_input_is_a_value_error(self) -> None:
        with pytest.raises(ValueError) as excinfo:
            PerformanceInput(set_number=0, reps_completed=5)
        assert excinfo.value.kind == ErrorKind.INVALID_INPUT

    def test_volume(self) -> None:
        assert PerformanceInput(1, 8, weight_kg=100.0).volume_kg == 800.0
        assert PerformanceInput(1, 20).volume_kg == 0.0
