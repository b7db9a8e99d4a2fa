"""Tests for the amortization engine."""

import pytest
from bondcalc.amortization import (
    amortize,
    max_affordable_loan,
    monthly_repayment,
    settle_early,
)
from bondcalc.errors import InvalidInputError


class TestMonthlyRepayment:
    def test_known_value(self):
        # R1,620,000 at 11.75% over 20 years
        pmt = monthly_repayment(1_620_000, 11.75, 20)
        assert pmt == pytest.approx(17_556.05, abs=0.01)

    def test_zero_rate(self):
        assert monthly_repayment(240_000, 0, 20) == pytest.approx(1_000)

    def test_higher_rate_means_higher_payment(self):
        assert monthly_repayment(1_000_000, 12, 20) > monthly_repayment(1_000_000, 9, 20)

    def test_shorter_term_means_higher_payment(self):
        assert monthly_repayment(1_000_000, 11, 10) > monthly_repayment(1_000_000, 11, 30)

    @pytest.mark.parametrize(
        "principal, rate, term",
        [(0, 11, 20), (-5, 11, 20), (100_000, 11, 0), (100_000, 11, -1), (100_000, 11, 2.5),
         (100_000, -1, 20), (100_000, 101, 20)],
    )
    def test_invalid_inputs(self, principal, rate, term):
        with pytest.raises(InvalidInputError):
            monthly_repayment(principal, rate, term)


class TestAmortize:
    def test_schedule_length(self):
        result = amortize(1_620_000, 11.75, 20)
        assert result.months == 240
        assert [p.index for p in result.schedule[:3]] == [1, 2, 3]

    def test_principal_portions_sum_to_principal(self):
        result = amortize(1_620_000, 11.75, 20)
        assert result.total_principal == pytest.approx(1_620_000, abs=0.01)

    def test_final_balance_is_exactly_zero(self):
        result = amortize(750_000, 10.5, 25)
        assert result.schedule[-1].remaining_balance == 0.0

    def test_balance_strictly_decreases(self):
        result = amortize(500_000, 11, 5)
        balances = [p.remaining_balance for p in result.schedule]
        assert all(b2 < b1 for b1, b2 in zip(balances, balances[1:]))

    def test_payment_splits_into_interest_and_principal(self):
        result = amortize(1_000_000, 11, 20)
        first = result.schedule[0]
        assert first.interest_portion == pytest.approx(1_000_000 * 0.11 / 12)
        assert first.interest_portion + first.principal_portion == pytest.approx(result.monthly_payment)

    def test_final_payment_absorbs_residual(self):
        result = amortize(1_000_000, 11, 20)
        assert result.schedule[-1].payment_amount == pytest.approx(result.monthly_payment, abs=0.01)

    def test_total_paid_matches_instalments(self):
        result = amortize(1_000_000, 11, 20)
        assert result.total_paid == pytest.approx(result.monthly_payment * 240, abs=0.01)
        assert result.total_interest == pytest.approx(result.total_paid - 1_000_000, abs=0.01)

    def test_zero_rate_is_linear(self):
        result = amortize(120_000, 0, 1)
        assert result.monthly_payment == pytest.approx(10_000)
        assert result.total_interest == 0
        assert result.schedule[5].remaining_balance == pytest.approx(60_000)

    def test_invalid_principal_produces_no_schedule(self):
        with pytest.raises(InvalidInputError):
            amortize(0, 11, 20)

    @pytest.mark.parametrize(
        "principal, term",
        [(float("nan"), 20), (float("inf"), 20), (-float("inf"), 20), (100_000, float("nan")),
         (100_000, float("inf"))],
    )
    def test_non_finite_inputs_rejected(self, principal, term):
        with pytest.raises(InvalidInputError):
            amortize(principal, 11, term)


class TestSettleEarly:
    def test_no_extras_saves_nothing(self):
        s = settle_early(1_000_000, 11, 20)
        assert s.baseline_months == 240
        assert s.accelerated_months == 240
        assert s.months_saved == 0
        assert s.interest_saved == pytest.approx(0, abs=0.01)

    def test_extra_monthly_shortens_term(self):
        s = settle_early(1_000_000, 11, 20, extra_monthly=2_000)
        assert s.accelerated_months < s.baseline_months
        assert s.interest_saved > 0
        years, months = s.years_months_saved
        assert years * 12 + months == s.months_saved

    def test_lump_sum_up_front_settles_immediately(self):
        s = settle_early(500_000, 11, 20, lump_sum=500_000)
        assert s.accelerated_months == 0
        assert s.accelerated_interest == 0
        assert s.accelerated_total_paid == pytest.approx(500_000)

    def test_later_lump_sum_saves_less(self):
        early = settle_early(1_000_000, 11, 20, lump_sum=100_000, lump_sum_month=12)
        late = settle_early(1_000_000, 11, 20, lump_sum=100_000, lump_sum_month=120)
        assert early.interest_saved > late.interest_saved > 0

    def test_negative_extra_rejected(self):
        with pytest.raises(InvalidInputError):
            settle_early(1_000_000, 11, 20, extra_monthly=-1)

    def test_non_finite_extra_rejected(self):
        with pytest.raises(InvalidInputError, match="finite"):
            settle_early(1_000_000, 11, 20, extra_monthly=float("inf"))


class TestMaxAffordableLoan:
    def test_inverts_monthly_repayment(self):
        pmt = monthly_repayment(1_000_000, 11.75, 20)
        assert max_affordable_loan(pmt, 0, 11.75, 20) == pytest.approx(1_000_000)

    def test_no_surplus(self):
        assert max_affordable_loan(30_000, 30_000, 11.75, 20) == 0.0
        assert max_affordable_loan(20_000, 30_000, 11.75, 20) == 0.0

    def test_zero_rate(self):
        assert max_affordable_loan(11_000, 10_000, 0, 10) == pytest.approx(120_000)

    def test_non_finite_income_rejected(self):
        with pytest.raises(InvalidInputError, match="finite"):
            max_affordable_loan(float("inf"), 10_000, 11.75, 20)
