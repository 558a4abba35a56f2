"""Tests for preparation estimate validation."""

import pytest

from preptimer.core.validation import ValidationResult, validate_preparation_time


class TestValidPreparationTime:
    @pytest.mark.parametrize("value", [1, 15, 60, 120, "30", " 45 ", 12.5, "7.5"])
    def test_accepted(self, value) -> None:
        assert validate_preparation_time(value) == ValidationResult(True, None)


class TestRequired:
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_missing_value(self, value) -> None:
        result = validate_preparation_time(value)
        assert result.is_valid is False
        assert result.error == "Preparation time is required"


class TestNotANumber:
    @pytest.mark.parametrize("value", ["abc", "15min", {}, [], object(), True, float("nan")])
    def test_rejected(self, value) -> None:
        result = validate_preparation_time(value)
        assert result.is_valid is False
        assert result.error == "Preparation time must be a number"


class TestBounds:
    @pytest.mark.parametrize("value", [0, -1, 0.5, "-10"])
    def test_below_minimum(self, value) -> None:
        result = validate_preparation_time(value)
        assert result.is_valid is False
        assert result.error == "Preparation time must be at least 1 minute"

    @pytest.mark.parametrize("value", [121, 120.5, "500", float("inf")])
    def test_above_maximum_names_the_limit(self, value) -> None:
        result = validate_preparation_time(value)
        assert result.is_valid is False
        assert "120" in result.error

    def test_result_serializes(self) -> None:
        assert validate_preparation_time(0).to_dict() == {
            "isValid": False,
            "error": "Preparation time must be at least 1 minute",
        }
