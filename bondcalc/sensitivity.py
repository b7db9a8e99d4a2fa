"""Sensitivity analysis: sweep one input, see how the verdict changes."""

from dataclasses import dataclass, fields, replace

from bondcalc.comparison import compare
from bondcalc.config import CostConfig
from bondcalc.errors import InvalidInputError
from bondcalc.output import fmt
from bondcalc.params import ComparisonInput

SWEEPABLE = tuple(
    f.name for f in fields(ComparisonInput) if f.name != "include_once_off_in_loan"
)


@dataclass(frozen=True)
class SweepResult:
    param_value: float
    bond_monthly: float
    bond_effective_cost: float
    cash_effective_cost: float
    difference: float
    cheaper: str


def sweep(
    inputs: ComparisonInput,
    param: str,
    values: list[float],
    config: CostConfig | None = None,
) -> list[SweepResult]:
    """Run the comparison for each value of one input field."""
    if param not in SWEEPABLE:
        raise InvalidInputError(f"Cannot sweep '{param}'. Choose from: {list(SWEEPABLE)}")
    results = []
    for val in values:
        if param == "loan_term_years":
            val = int(val)
        result = compare(replace(inputs, **{param: val}), config)
        results.append(SweepResult(
            param_value=val,
            bond_monthly=result.bond_monthly,
            bond_effective_cost=result.bond_effective_cost,
            cash_effective_cost=result.cash_effective_cost,
            difference=result.difference,
            cheaper=result.cheaper,
        ))
    return results


def format_sweep(param: str, results: list[SweepResult]) -> str:
    """Format sweep results as a table."""
    is_pct = param.endswith("rate")
    header = (
        f"{param:>22} | {'Bond monthly':>13} | {'Bond effective':>14} | "
        f"{'Cash effective':>14} | {'Difference':>14} | {'Cheaper':>7}"
    )
    sep = "-" * len(header)
    lines = [f"Sensitivity: {param}", header, sep]

    for r in results:
        val_str = f"{r.param_value:.2f}%" if is_pct else f"{r.param_value:,.0f}"
        lines.append(
            f"{val_str:>22} | {fmt(r.bond_monthly):>13} | {fmt(r.bond_effective_cost):>14} | "
            f"{fmt(r.cash_effective_cost):>14} | {fmt(r.difference):>14} | {r.cheaper:>7}"
        )

    return "\n".join(lines)


def frange(start: float, stop: float, step: float) -> list[float]:
    """Generate a list of floats from start to stop (inclusive) by step."""
    if step <= 0:
        raise InvalidInputError(f"Step must be positive, got {step}")
    values = []
    val = start
    while val <= stop + step / 2:  # tolerance for floating point
        values.append(round(val, 6))
        val += step
    return values
