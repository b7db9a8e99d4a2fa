"""Bond vs cash: which way of paying for a property costs less.

Both paths are measured over the bond term.

Bond path:
  - Upfront: deposit, plus once-off costs unless they are financed
  - Monthly: instalments on the loan (plus financed once-off costs)
  - Opportunity cost: growth the upfront cash could have earned

Cash path:
  - Upfront: full price plus once-off costs
  - Opportunity cost: growth that whole outlay could have earned

Effective cost is every rand leaving the buyer's pocket plus the growth
forgone on committed capital. The bond path's conventions (opportunity cost
on financed costs, recoverable interest) come from ``ComparisonPolicy``.
"""

import logging
from dataclasses import dataclass

from bondcalc.amortization import amortize
from bondcalc.config import CostConfig, default_config
from bondcalc.costs import OnceOffCosts, aggregate_once_off_costs
from bondcalc.opportunity import project_opportunity_cost
from bondcalc.params import ComparisonInput

logger = logging.getLogger(__name__)

BOND = "bond"
CASH = "cash"
EQUAL = "equal"


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of one comparison. Amounts are unrounded rands."""

    cheaper: str  # "bond", "cash" or "equal"
    difference: float  # bond - cash; negative means the bond is cheaper
    loan_amount: float
    once_off_costs: OnceOffCosts

    # Bond path
    financed_amount: float  # loan plus any financed once-off costs
    bond_monthly: float
    bond_total_paid: float
    bond_interest_paid: float
    bond_upfront_cash: float
    bond_total_out_of_pocket: float
    bond_opp_cost: float
    bond_effective_cost: float

    # Cash path
    cash_outlay_now: float
    cash_opp_cost: float
    cash_effective_cost: float


def decide(difference: float, tolerance: float) -> str:
    """Pick the cheaper path from ``bond - cash``."""
    if difference < -tolerance:
        return BOND
    if difference > tolerance:
        return CASH
    return EQUAL


def compare(inputs: ComparisonInput, config: CostConfig | None = None) -> ComparisonResult:
    """Compare financing a purchase with a bond against paying cash."""
    inputs.validate()
    if config is None:
        config = default_config()
    policy = config.policy
    years = int(inputs.loan_term_years)

    loan_amount = inputs.loan_amount
    costs = aggregate_once_off_costs(inputs.purchase_price, loan_amount, config)

    # --- Bond path ---
    if inputs.include_once_off_in_loan:
        financed = loan_amount + costs.total
        upfront = inputs.deposit_amount
    else:
        financed = loan_amount
        upfront = inputs.deposit_amount + costs.total

    if financed > 0:
        schedule = amortize(financed, inputs.annual_interest_rate, years)
        bond_monthly = schedule.monthly_payment
        interest_paid = schedule.total_interest
    else:
        bond_monthly = 0.0
        interest_paid = 0.0
    bond_total_paid = bond_monthly * years * 12

    committed = upfront
    if inputs.include_once_off_in_loan and policy.financed_costs_accrue_opportunity:
        committed += costs.total
    bond_opp_cost = project_opportunity_cost(
        committed, inputs.opportunity_rate, years, policy.compounding_periods
    )
    out_of_pocket = upfront + bond_total_paid
    bond_effective = (
        out_of_pocket + bond_opp_cost - interest_paid * policy.interest_deduction_rate
    )

    # --- Cash path ---
    cash_outlay = inputs.purchase_price + costs.total
    cash_opp_cost = project_opportunity_cost(
        cash_outlay, inputs.opportunity_rate, years, policy.compounding_periods
    )
    cash_effective = cash_outlay + cash_opp_cost

    difference = bond_effective - cash_effective
    cheaper = decide(difference, policy.tolerance)
    logger.debug(
        "Compared bond vs cash for %.2f (%s): difference %.2f -> %s",
        inputs.purchase_price,
        config.tax_year,
        difference,
        cheaper,
    )

    return ComparisonResult(
        cheaper=cheaper,
        difference=difference,
        loan_amount=loan_amount,
        once_off_costs=costs,
        financed_amount=financed,
        bond_monthly=bond_monthly,
        bond_total_paid=bond_total_paid,
        bond_interest_paid=interest_paid,
        bond_upfront_cash=upfront,
        bond_total_out_of_pocket=out_of_pocket,
        bond_opp_cost=bond_opp_cost,
        bond_effective_cost=bond_effective,
        cash_outlay_now=cash_outlay,
        cash_opp_cost=cash_opp_cost,
        cash_effective_cost=cash_effective,
    )
