"""Acreage → briquette count conversion.

Pure functions only.  ``compute`` expects an already-validated positive
acreage; ``parse_acreage`` is the validation step shared by the input
controllers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

SQ_FT_PER_ACRE = 43560
SQ_FT_PER_BRIQUETTE = 100

INVALID_ACREAGE_MESSAGE = "Please enter a valid positive number."


class InvalidAcreageError(ValueError):
    """Raised when raw input is not a finite positive number."""

    def __init__(self, raw: str):
        super().__init__(INVALID_ACREAGE_MESSAGE)
        self.raw = raw


@dataclass(frozen=True)
class CalculationResult:
    """Derived figures for one acreage value."""

    acres: float
    area_sq_ft: float
    units_needed: int


def compute(acres: float) -> CalculationResult:
    """Return area and briquette count for ``acres``.

    The count is rounded up so a partial 100 sq ft patch still gets a
    briquette.
    """
    area = acres * SQ_FT_PER_ACRE
    return CalculationResult(
        acres=acres,
        area_sq_ft=area,
        units_needed=math.ceil(area / SQ_FT_PER_BRIQUETTE),
    )


def parse_acreage(raw: str) -> float:
    """Parse user text into a positive acreage.

    Raises
    ------
    InvalidAcreageError
        For non-numeric, non-finite, zero or negative input.
    """
    try:
        value = float(raw.strip())
    except (TypeError, ValueError, AttributeError):
        raise InvalidAcreageError(raw) from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidAcreageError(raw)
    return value
