"""Once-off purchase costs: transfer duty, bond registration, attorney fees.

Each cost is described by a ``FeeSchedule`` taken from configuration. A
schedule whose kind or basis is not recognised is a configuration error and
aborts the whole aggregation; a fee is never silently left out.
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bondcalc.brackets import TaxBracket, evaluate_brackets
from bondcalc.errors import ConfigurationError

if TYPE_CHECKING:
    from bondcalc.config import CostConfig

PURCHASE_PRICE = "purchase_price"
LOAN_AMOUNT = "loan_amount"
BASES = (PURCHASE_PRICE, LOAN_AMOUNT)


@dataclass(frozen=True)
class FeeSchedule:
    """How one once-off cost is computed.

    kind:
      - "flat": ``amount``
      - "percentage": ``rate`` (a fraction) times the basis
      - "bracketed": marginal ``brackets`` evaluated on the basis
    """

    kind: str
    basis: str = PURCHASE_PRICE
    amount: float = 0.0
    rate: float = 0.0
    brackets: tuple[TaxBracket, ...] = field(default=(), repr=False)
    label: str = ""


@dataclass(frozen=True)
class OnceOffCosts:
    """Costs paid at transfer. ``total`` is always derived."""

    transfer_duty: float
    bond_registration_fee: float
    attorney_fees: float
    other_fees: float

    @property
    def total(self) -> float:
        return (
            self.transfer_duty
            + self.bond_registration_fee
            + self.attorney_fees
            + self.other_fees
        )


def _flat(schedule: FeeSchedule, basis_value: float) -> float:
    return schedule.amount


def _percentage(schedule: FeeSchedule, basis_value: float) -> float:
    return max(basis_value, 0.0) * schedule.rate


def _bracketed(schedule: FeeSchedule, basis_value: float) -> float:
    return evaluate_brackets(basis_value, schedule.brackets)


FEE_CALCULATORS = {
    "flat": _flat,
    "percentage": _percentage,
    "bracketed": _bracketed,
}


def validate_schedule(schedule: FeeSchedule) -> None:
    """A fee can never be negative: reject amounts and rates below zero."""
    name = schedule.label or "fee"
    for attr in ("amount", "rate"):
        value = getattr(schedule, attr)
        if not math.isfinite(value) or value < 0:
            raise ConfigurationError(
                f"Fee schedule {attr} must be a non-negative number ({name}), got {value}"
            )


def fee_amount(schedule: FeeSchedule, purchase_price: float, loan_amount: float) -> float:
    """Evaluate a single fee schedule."""
    validate_schedule(schedule)
    calc = FEE_CALCULATORS.get(schedule.kind)
    if calc is None:
        name = schedule.label or "fee"
        raise ConfigurationError(
            f"Unknown fee schedule kind '{schedule.kind}' ({name}). "
            f"Supported: {list(FEE_CALCULATORS.keys())}"
        )
    if schedule.basis not in BASES:
        raise ConfigurationError(
            f"Unknown fee basis '{schedule.basis}'. Supported: {list(BASES)}"
        )
    if schedule.basis == LOAN_AMOUNT:
        if loan_amount <= 0:
            return 0.0  # no bond, nothing to register
        return calc(schedule, loan_amount)
    return calc(schedule, purchase_price)


def aggregate_once_off_costs(
    purchase_price: float, loan_amount: float, config: "CostConfig"
) -> OnceOffCosts:
    """Sum every configured once-off cost for a purchase."""
    transfer_duty = fee_amount(config.transfer_duty, purchase_price, loan_amount)
    bond_registration = fee_amount(config.bond_registration, purchase_price, loan_amount)
    attorney = fee_amount(config.attorney_fees, purchase_price, loan_amount)
    other = sum(fee_amount(s, purchase_price, loan_amount) for s in config.other_fees)
    return OnceOffCosts(
        transfer_duty=transfer_duty,
        bond_registration_fee=bond_registration,
        attorney_fees=attorney,
        other_fees=other,
    )
