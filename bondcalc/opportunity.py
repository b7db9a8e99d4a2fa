"""Opportunity cost of committing a lump sum instead of investing it."""

import math

from bondcalc.errors import InvalidInputError


def project_opportunity_cost(
    principal: float,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = 1,
) -> float:
    """Growth forgone on ``principal`` held for ``years`` at an annual rate.

    Returns ``principal * ((1 + rate/m) ** (m * years) - 1)`` where ``m`` is
    the number of compounding periods per year (1 = annual).
    """
    if not (math.isfinite(principal) and math.isfinite(years)):
        raise InvalidInputError(
            f"Principal and horizon must be finite, got {principal} over {years} years"
        )
    if principal < 0:
        raise InvalidInputError(f"Principal cannot be negative, got {principal}")
    if years < 0:
        raise InvalidInputError(f"Horizon cannot be negative, got {years}")
    if not 0 <= annual_rate_percent <= 100:
        raise InvalidInputError(
            f"Annual rate must be between 0 and 100 percent, got {annual_rate_percent}"
        )
    if periods_per_year < 1:
        raise InvalidInputError(
            f"Compounding periods per year must be at least 1, got {periods_per_year}"
        )
    if annual_rate_percent == 0 or principal == 0:
        return 0.0
    periodic = annual_rate_percent / 100 / periods_per_year
    return principal * ((1 + periodic) ** (periods_per_year * years) - 1)
