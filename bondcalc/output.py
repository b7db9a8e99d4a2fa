"""Presentation: currency text parsing and report formatting.

Rounding happens only here; the engine works in unrounded rands.
"""

import csv
import io
import math

from bondcalc.amortization import Amortization, EarlySettlement
from bondcalc.comparison import BOND, CASH, ComparisonResult
from bondcalc.config import CostConfig
from bondcalc.costs import OnceOffCosts
from bondcalc.errors import InvalidInputError
from bondcalc.params import ComparisonInput

_GROUPING = (",", " ", "\u00a0", "_")


def parse_amount(text: str | float | int) -> float:
    """Parse currency text such as ``"R 1,800,000"`` into a number."""
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        value = _parse_text(text)
    if not math.isfinite(value):
        raise InvalidInputError(f"Not an amount: {text!r}")
    return value


def _parse_text(text: str) -> float:
    raw = text.strip()
    if raw[:1] in ("R", "r"):
        raw = raw[1:]
    for sep in _GROUPING:
        raw = raw.replace(sep, "")
    try:
        return float(raw)
    except ValueError:
        raise InvalidInputError(f"Not an amount: {text!r}") from None


def fmt(value: float) -> str:
    """Format a rand amount."""
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value >= 1_000_000:
        return f"{sign}R{value / 1_000_000:,.2f}M"
    return f"{sign}R{value:,.0f}"


def summary_header(inputs: ComparisonInput, config: CostConfig) -> str:
    """Generate the header showing the scenario."""
    financed = "financed in bond" if inputs.include_once_off_in_loan else "paid upfront"
    lines = [
        "Bond vs Cash Comparison",
        "=" * 70,
        "",
        f"  Purchase price:    {fmt(inputs.purchase_price)}",
        f"  Deposit:           {fmt(inputs.deposit_amount)} ({inputs.deposit_pct:.1%})",
        f"  Loan amount:       {fmt(inputs.loan_amount)}",
        f"  Bond rate:         {inputs.annual_interest_rate:.2f}% p.a. ({inputs.loan_term_years}yr)",
        f"  Opportunity rate:  {inputs.opportunity_rate:.2f}% p.a.",
        f"  Once-off costs:    {financed}",
        f"  Cost tables:       {config.jurisdiction} {config.tax_year}",
        "",
    ]
    return "\n".join(lines)


def once_off_table(costs: OnceOffCosts) -> str:
    """Breakdown of once-off costs."""
    rows = [
        ("Transfer duty", costs.transfer_duty),
        ("Bond registration", costs.bond_registration_fee),
        ("Conveyancing", costs.attorney_fees),
        ("Other fees", costs.other_fees),
    ]
    lines = ["Once-off costs:"]
    lines += [f"  {label:<20} {fmt(value):>14}" for label, value in rows]
    lines.append(f"  {'Total':<20} {fmt(costs.total):>14}")
    return "\n".join(lines)


def comparison_table(result: ComparisonResult) -> str:
    """Side-by-side bond and cash figures."""
    header = f"{'':<24} | {'Bond':>14} | {'Cash':>14}"
    sep = "-" * len(header)
    rows = [
        ("Upfront cash", result.bond_upfront_cash, result.cash_outlay_now),
        ("Monthly instalment", result.bond_monthly, 0.0),
        ("Instalments total", result.bond_total_paid, 0.0),
        ("Out of pocket", result.bond_total_out_of_pocket, result.cash_outlay_now),
        ("Opportunity cost", result.bond_opp_cost, result.cash_opp_cost),
        ("Effective cost", result.bond_effective_cost, result.cash_effective_cost),
    ]
    lines = [header, sep]
    for label, bond, cash in rows:
        lines.append(f"{label:<24} | {fmt(bond):>14} | {fmt(cash):>14}")
    return "\n".join(lines)


def verdict(result: ComparisonResult) -> str:
    """One-line conclusion."""
    gap = fmt(abs(result.difference))
    if result.cheaper == BOND:
        return f"Financing with a bond is cheaper by {gap}."
    if result.cheaper == CASH:
        return f"Paying cash is cheaper by {gap}."
    return "Both options cost about the same."


def full_report(inputs: ComparisonInput, result: ComparisonResult, config: CostConfig) -> str:
    """Generate a complete comparison report."""
    return "\n".join([
        summary_header(inputs, config),
        once_off_table(result.once_off_costs),
        "",
        comparison_table(result),
        "",
        verdict(result),
    ])


def schedule_table(amortization: Amortization, monthly: bool = False) -> str:
    """Amortization schedule, rolled up by year unless ``monthly``."""
    label = "Month" if monthly else "Year"
    header = (
        f"{label:>5} | {'Paid':>12} | {'Interest':>12} | {'Principal':>12} | {'Balance':>14}"
    )
    sep = "-" * len(header)
    lines = [f"Monthly instalment: {fmt(amortization.monthly_payment)}", header, sep]

    if monthly:
        rows = [
            (p.index, p.payment_amount, p.interest_portion, p.principal_portion, p.remaining_balance)
            for p in amortization.schedule
        ]
    else:
        rows = []
        for start in range(0, len(amortization.schedule), 12):
            year = amortization.schedule[start:start + 12]
            rows.append((
                start // 12 + 1,
                sum(p.payment_amount for p in year),
                sum(p.interest_portion for p in year),
                sum(p.principal_portion for p in year),
                year[-1].remaining_balance,
            ))

    for idx, paid, interest, principal, balance in rows:
        lines.append(
            f"{idx:>5} | {fmt(paid):>12} | {fmt(interest):>12} | "
            f"{fmt(principal):>12} | {fmt(balance):>14}"
        )
    lines.append(sep)
    lines.append(
        f"{'Total':>5} | {fmt(amortization.total_paid):>12} | "
        f"{fmt(amortization.total_interest):>12} | {fmt(amortization.total_principal):>12} |"
    )
    return "\n".join(lines)


def schedule_to_csv(amortization: Amortization) -> str:
    """Export a monthly schedule to CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["month", "payment", "interest", "principal", "balance"])
    for p in amortization.schedule:
        writer.writerow([
            p.index,
            f"{p.payment_amount:.2f}",
            f"{p.interest_portion:.2f}",
            f"{p.principal_portion:.2f}",
            f"{p.remaining_balance:.2f}",
        ])
    return output.getvalue()


def settlement_report(settlement: EarlySettlement) -> str:
    """Summary of paying a bond off early."""
    years, months = settlement.years_months_saved
    lines = [
        f"Monthly instalment:   {fmt(settlement.monthly_payment)}",
        f"Baseline:             {settlement.baseline_months} months, "
        f"{fmt(settlement.baseline_interest)} interest",
        f"With extra payments:  {settlement.accelerated_months} months, "
        f"{fmt(settlement.accelerated_interest)} interest",
        f"Time saved:           {years} years {months} months",
        f"Interest saved:       {fmt(settlement.interest_saved)}",
    ]
    return "\n".join(lines)
