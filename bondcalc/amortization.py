"""Bond amortization: monthly instalments and running balance schedules.

All rates are annual percentages (11.75 means 11.75% p.a.), compounded
monthly as South African home loans are quoted. Nothing here rounds; the
residual drift of a float schedule is absorbed by the final period.
"""

import math
from dataclasses import dataclass

from bondcalc.errors import InvalidInputError

# Balances below half a cent count as settled when running a loan down.
_SETTLED = 0.005
# Upper bound on run-down length so a mis-specified loan cannot loop forever.
_MAX_MONTHS = 1200


@dataclass(frozen=True)
class PeriodEntry:
    """One monthly instalment in an amortization schedule."""

    index: int  # 1-based month number
    payment_amount: float
    interest_portion: float
    principal_portion: float
    remaining_balance: float


@dataclass(frozen=True)
class Amortization:
    """Monthly payment plus the full schedule it produces."""

    monthly_payment: float
    schedule: tuple[PeriodEntry, ...]

    @property
    def months(self) -> int:
        return len(self.schedule)

    @property
    def total_paid(self) -> float:
        return sum(p.payment_amount for p in self.schedule)

    @property
    def total_interest(self) -> float:
        return sum(p.interest_portion for p in self.schedule)

    @property
    def total_principal(self) -> float:
        return sum(p.principal_portion for p in self.schedule)


@dataclass(frozen=True)
class EarlySettlement:
    """Baseline vs accelerated repayment of the same bond."""

    monthly_payment: float
    baseline_months: int
    baseline_interest: float
    baseline_total_paid: float
    accelerated_months: int
    accelerated_interest: float
    accelerated_total_paid: float

    @property
    def months_saved(self) -> int:
        return max(self.baseline_months - self.accelerated_months, 0)

    @property
    def interest_saved(self) -> float:
        return max(self.baseline_interest - self.accelerated_interest, 0.0)

    @property
    def years_months_saved(self) -> tuple[int, int]:
        return divmod(self.months_saved, 12)


def _check_rate(annual_rate_percent: float) -> None:
    if not 0 <= annual_rate_percent <= 100:
        raise InvalidInputError(
            f"Annual rate must be between 0 and 100 percent, got {annual_rate_percent}"
        )


def _check_amount(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value}")


def _check_term(term_years: float) -> int:
    _check_amount("Loan term", term_years)
    if term_years <= 0:
        raise InvalidInputError(f"Loan term must be positive, got {term_years}")
    if int(term_years) != term_years:
        raise InvalidInputError(f"Loan term must be whole years, got {term_years}")
    return int(term_years)


def monthly_repayment(
    principal: float, annual_rate_percent: float, term_years: int
) -> float:
    """Fixed monthly instalment from the standard annuity formula."""
    _check_amount("Principal", principal)
    if principal <= 0:
        raise InvalidInputError(f"Principal must be positive, got {principal}")
    _check_rate(annual_rate_percent)
    n = _check_term(term_years) * 12
    if annual_rate_percent == 0:
        return principal / n
    r = annual_rate_percent / 100 / 12
    return principal * r / (1 - (1 + r) ** -n)


def amortize(
    principal: float, annual_rate_percent: float, term_years: int
) -> Amortization:
    """Build the month-by-month schedule for a fixed-rate bond.

    The schedule has exactly ``term_years * 12`` entries. Any residual left
    by float drift is assigned to the final principal portion so the last
    remaining balance is exactly zero.
    """
    payment = monthly_repayment(principal, annual_rate_percent, term_years)
    n = int(term_years) * 12
    r = annual_rate_percent / 100 / 12

    balance = principal
    schedule = []
    for index in range(1, n + 1):
        interest = balance * r
        if index == n:
            principal_part = balance
            balance = 0.0
        else:
            principal_part = payment - interest
            balance -= principal_part
        schedule.append(
            PeriodEntry(
                index=index,
                payment_amount=interest + principal_part,
                interest_portion=interest,
                principal_portion=principal_part,
                remaining_balance=balance,
            )
        )
    return Amortization(monthly_payment=payment, schedule=tuple(schedule))


def _run_down(
    balance: float,
    monthly_rate: float,
    payment: float,
    lump_sum: float = 0.0,
    lump_sum_month: int = 0,
) -> tuple[int, float, float]:
    """Pay a balance down until settled.

    Returns (months, total_interest, total_paid). The lump sum, if any, is
    applied once ``lump_sum_month`` instalments have been made.
    """
    months = 0
    total_interest = 0.0
    total_paid = 0.0
    while months < _MAX_MONTHS:
        if lump_sum > 0 and months == lump_sum_month:
            applied = min(lump_sum, balance)
            balance -= applied
            total_paid += applied
        if balance <= _SETTLED:
            break
        interest = balance * monthly_rate
        principal_part = min(payment - interest, balance)
        if principal_part <= 0:
            raise InvalidInputError("Payment does not cover the monthly interest")
        balance -= principal_part
        total_interest += interest
        total_paid += interest + principal_part
        months += 1
    return months, total_interest, total_paid


def settle_early(
    principal: float,
    annual_rate_percent: float,
    term_years: int,
    extra_monthly: float = 0.0,
    lump_sum: float = 0.0,
    lump_sum_month: int = 0,
) -> EarlySettlement:
    """Compare the contractual run-down with one that pays extra."""
    _check_amount("Extra monthly payment", extra_monthly)
    _check_amount("Lump sum", lump_sum)
    _check_amount("Lump sum month", lump_sum_month)
    if extra_monthly < 0 or lump_sum < 0 or lump_sum_month < 0:
        raise InvalidInputError("Extra payments and lump sum month cannot be negative")
    payment = monthly_repayment(principal, annual_rate_percent, term_years)
    r = annual_rate_percent / 100 / 12

    base_months, base_interest, base_paid = _run_down(principal, r, payment)
    accel_months, accel_interest, accel_paid = _run_down(
        principal, r, payment + extra_monthly, lump_sum, int(lump_sum_month)
    )
    return EarlySettlement(
        monthly_payment=payment,
        baseline_months=base_months,
        baseline_interest=base_interest,
        baseline_total_paid=base_paid,
        accelerated_months=accel_months,
        accelerated_interest=accel_interest,
        accelerated_total_paid=accel_paid,
    )


def max_affordable_loan(
    monthly_income: float,
    monthly_expenses: float,
    annual_rate_percent: float,
    term_years: int,
) -> float:
    """Largest principal whose instalment fits the monthly surplus."""
    _check_amount("Monthly income", monthly_income)
    _check_amount("Monthly expenses", monthly_expenses)
    _check_rate(annual_rate_percent)
    n = _check_term(term_years) * 12
    surplus = monthly_income - monthly_expenses
    if surplus <= 0:
        return 0.0
    if annual_rate_percent == 0:
        return surplus * n
    r = annual_rate_percent / 100 / 12
    return surplus * (1 - (1 + r) ** -n) / r
