"""Inputs for the bond-vs-cash comparison."""

import math
from dataclasses import dataclass

from bondcalc.errors import InvalidInputError


@dataclass(frozen=True)
class ComparisonInput:
    """One purchase scenario. Rates are annual percentages (0-100)."""

    purchase_price: float = 1_800_000
    deposit_amount: float = 180_000
    annual_interest_rate: float = 11.75  # prime-linked bond rate
    loan_term_years: int = 20
    opportunity_rate: float = 8.0  # return the cash could earn elsewhere
    include_once_off_in_loan: bool = False

    @property
    def loan_amount(self) -> float:
        return self.purchase_price - self.deposit_amount

    @property
    def deposit_pct(self) -> float:
        return self.deposit_amount / self.purchase_price if self.purchase_price > 0 else 0.0

    def validate(self) -> None:
        """Raise InvalidInputError for out-of-range values. Nothing is clamped."""
        for name in (
            "purchase_price",
            "deposit_amount",
            "annual_interest_rate",
            "loan_term_years",
            "opportunity_rate",
        ):
            if not math.isfinite(getattr(self, name)):
                raise InvalidInputError(f"{name} must be a finite number")
        if self.purchase_price <= 0:
            raise InvalidInputError(
                f"Purchase price must be positive, got {self.purchase_price}"
            )
        if self.deposit_amount < 0:
            raise InvalidInputError(
                f"Deposit cannot be negative, got {self.deposit_amount}"
            )
        if self.deposit_amount > self.purchase_price:
            raise InvalidInputError(
                f"Deposit {self.deposit_amount} exceeds purchase price {self.purchase_price}"
            )
        for name in ("annual_interest_rate", "opportunity_rate"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise InvalidInputError(f"{name} must be between 0 and 100, got {value}")
        if self.loan_term_years <= 0 or int(self.loan_term_years) != self.loan_term_years:
            raise InvalidInputError(
                f"Loan term must be a positive whole number of years, got {self.loan_term_years}"
            )
