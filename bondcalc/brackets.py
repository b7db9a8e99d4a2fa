"""Marginal (progressive) bracket evaluation.

Used for transfer duty and for any fee guideline published as a bracket
table. The tables themselves are configuration; see ``bondcalc.rates``.
"""

import math
from dataclasses import dataclass

from bondcalc.errors import ConfigurationError


@dataclass(frozen=True)
class TaxBracket:
    """One band of a marginal table.

    An amount in this band owes ``base_amount + (amount - threshold_low) * rate``.
    """

    threshold_low: float
    threshold_high: float | None  # None = unbounded
    rate: float
    base_amount: float = 0.0

    def contains(self, amount: float) -> bool:
        if amount < self.threshold_low:
            return False
        return self.threshold_high is None or amount < self.threshold_high


def validate_brackets(brackets: tuple[TaxBracket, ...] | list[TaxBracket]) -> None:
    """Raise ConfigurationError unless brackets are contiguous and ascending."""
    if not brackets:
        raise ConfigurationError("Bracket table is empty")
    if brackets[0].threshold_low != 0:
        raise ConfigurationError(
            f"First bracket must start at 0, got {brackets[0].threshold_low}"
        )
    for i, b in enumerate(brackets):
        if b.rate < 0 or b.base_amount < 0:
            raise ConfigurationError(f"Bracket {i} has a negative rate or base amount")
        last = i == len(brackets) - 1
        if b.threshold_high is None:
            if not last:
                raise ConfigurationError(f"Only the last bracket may be unbounded (bracket {i})")
            continue
        if last:
            raise ConfigurationError("Last bracket must be unbounded")
        if b.threshold_high <= b.threshold_low:
            raise ConfigurationError(
                f"Bracket {i} is empty or descending: "
                f"{b.threshold_low} to {b.threshold_high}"
            )
        if brackets[i + 1].threshold_low != b.threshold_high:
            raise ConfigurationError(
                f"Brackets {i} and {i + 1} are not contiguous: "
                f"{b.threshold_high} != {brackets[i + 1].threshold_low}"
            )


def evaluate_brackets(
    amount: float, brackets: tuple[TaxBracket, ...] | list[TaxBracket]
) -> float:
    """Total liability for an amount under a marginal bracket table."""
    validate_brackets(brackets)
    if amount <= 0:
        return 0.0
    for bracket in brackets:
        if bracket.contains(amount):
            return bracket.base_amount + (amount - bracket.threshold_low) * bracket.rate
    # validate_brackets guarantees coverage of [0, inf)
    raise ConfigurationError(f"No bracket covers {amount}")


def brackets_from_limits(rows: list[dict]) -> tuple[TaxBracket, ...]:
    """Build contiguous brackets from an upper-limit table.

    Published schedules list each band by its upper limit, e.g.
    ``{"limit": 1_663_800, "rate": 0.03, "base_amount": 0}``. The lower
    threshold of each band is the previous limit. A final limit of
    ``None`` or infinity means unbounded.
    """
    brackets = []
    low = 0.0
    for i, row in enumerate(rows):
        try:
            limit = row.get("limit")
            high = None if limit is None or math.isinf(float(limit)) else float(limit)
            rate = float(row.get("rate", 0.0))
            base = float(row.get("base_amount", row.get("fee", 0.0)))
        except (AttributeError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Malformed bracket row {i}: {row!r}") from exc
        brackets.append(TaxBracket(threshold_low=low, threshold_high=high, rate=rate, base_amount=base))
        if high is not None:
            low = high
    result = tuple(brackets)
    validate_brackets(result)
    return result
