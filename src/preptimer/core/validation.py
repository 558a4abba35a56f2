"""Validator for shopkeeper-entered preparation estimates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from preptimer.core.snapshot import as_float

MIN_PREPARATION_MINUTES = 1
MAX_PREPARATION_MINUTES = 120


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation; failures carry a user-facing message."""

    is_valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"isValid": self.is_valid, "error": self.error}


def _to_number(raw: Any) -> float | None:
    if isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        number = as_float(raw)
    # inf is still a number and falls through to the upper bound check
    if number is None or math.isnan(number):
        return None
    return number


def validate_preparation_time(raw_input: Any) -> ValidationResult:
    """Check that *raw_input* is a preparation estimate between 1 and 120 minutes.

    Numeric strings and fractional minutes are accepted.  Never raises.
    """
    if raw_input is None or (isinstance(raw_input, str) and not raw_input.strip()):
        return ValidationResult(False, "Preparation time is required")

    minutes = _to_number(raw_input)
    if minutes is None:
        return ValidationResult(False, "Preparation time must be a number")
    if minutes < MIN_PREPARATION_MINUTES:
        return ValidationResult(
            False, f"Preparation time must be at least {MIN_PREPARATION_MINUTES} minute"
        )
    if minutes > MAX_PREPARATION_MINUTES:
        return ValidationResult(
            False, f"Preparation time cannot exceed {MAX_PREPARATION_MINUTES} minutes"
        )
    return ValidationResult(True)
