"""Tests for the bond vs cash comparator."""

from dataclasses import replace

import pytest
from bondcalc.comparison import compare, decide
from bondcalc.config import ComparisonPolicy, default_config
from bondcalc.costs import FeeSchedule
from bondcalc.errors import ConfigurationError, InvalidInputError
from bondcalc.opportunity import project_opportunity_cost
from bondcalc.params import ComparisonInput


def with_policy(**kwargs):
    return replace(default_config(), policy=ComparisonPolicy(**kwargs))


class TestDefaultScenario:
    """R1.8m purchase, 10% deposit, 11.75% over 20 years, 8% opportunity rate."""

    def test_loan_amount(self):
        result = compare(ComparisonInput())
        assert result.loan_amount == 1_620_000
        assert result.financed_amount == 1_620_000

    def test_bond_monthly_matches_annuity(self):
        result = compare(ComparisonInput())
        assert result.bond_monthly == pytest.approx(17_556.054413, rel=1e-9)
        assert result.bond_total_paid == pytest.approx(result.bond_monthly * 240)
        assert result.bond_interest_paid == pytest.approx(result.bond_total_paid - 1_620_000, abs=0.01)

    def test_once_off_costs(self):
        result = compare(ComparisonInput())
        assert result.once_off_costs.transfer_duty == pytest.approx(21_786)
        assert result.once_off_costs.total == pytest.approx(96_786)

    def test_bond_path(self):
        result = compare(ComparisonInput())
        assert result.bond_upfront_cash == pytest.approx(276_786)
        assert result.bond_opp_cost == pytest.approx(project_opportunity_cost(276_786, 8.0, 20))
        assert result.bond_total_out_of_pocket == pytest.approx(276_786 + result.bond_total_paid)
        assert result.bond_effective_cost == pytest.approx(5_503_540.74, abs=0.05)

    def test_cash_path(self):
        result = compare(ComparisonInput())
        assert result.cash_outlay_now == pytest.approx(1_896_786)
        assert result.cash_effective_cost == pytest.approx(8_840_838.26, abs=0.05)

    def test_bond_is_cheaper(self):
        result = compare(ComparisonInput())
        assert result.difference == pytest.approx(
            result.bond_effective_cost - result.cash_effective_cost
        )
        assert result.difference < 0
        assert result.cheaper == "bond"

    def test_idempotent(self):
        inputs = ComparisonInput()
        assert compare(inputs) == compare(inputs)


class TestScenarios:
    def test_full_deposit_has_no_bond(self):
        result = compare(ComparisonInput(deposit_amount=1_800_000))
        assert result.loan_amount == 0
        assert result.bond_monthly == 0.0
        assert result.bond_total_paid == 0.0
        assert result.once_off_costs.bond_registration_fee == 0.0
        assert result.difference == 0.0
        assert result.cheaper == "equal"

    def test_full_deposit_with_financed_costs(self):
        result = compare(ComparisonInput(deposit_amount=1_800_000, include_once_off_in_loan=True))
        assert result.loan_amount == 0
        assert result.financed_amount == pytest.approx(result.once_off_costs.total)
        assert result.bond_monthly > 0

    def test_financed_once_off_costs(self):
        result = compare(ComparisonInput(include_once_off_in_loan=True))
        total = result.once_off_costs.total
        assert result.financed_amount == pytest.approx(1_620_000 + total)
        assert result.bond_upfront_cash == 180_000
        assert result.cash_outlay_now == pytest.approx(1_800_000 + total)

    def test_cash_cheaper_without_opportunity_return(self):
        result = compare(ComparisonInput(opportunity_rate=0))
        assert result.bond_opp_cost == 0
        assert result.cash_opp_cost == 0
        assert result.cheaper == "cash"
        assert result.difference == pytest.approx(result.bond_interest_paid, abs=0.01)

    def test_interest_free_bond_without_opportunity_return_is_equal(self):
        result = compare(ComparisonInput(annual_interest_rate=0, opportunity_rate=0))
        assert result.bond_monthly == pytest.approx(1_620_000 / 240)
        assert result.cheaper == "equal"

    def test_zero_interest_bond_is_cheaper_with_opportunity_return(self):
        result = compare(ComparisonInput(annual_interest_rate=0, opportunity_rate=5))
        assert result.cheaper == "bond"


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"deposit_amount": -1},
            {"deposit_amount": 2_000_000},
            {"purchase_price": 0},
            {"annual_interest_rate": -1},
            {"opportunity_rate": 150},
            {"loan_term_years": 0},
            {"loan_term_years": 12.5},
            {"purchase_price": float("nan")},
        ],
    )
    def test_invalid_input(self, kwargs):
        with pytest.raises(InvalidInputError):
            compare(ComparisonInput(**kwargs))

    def test_unknown_fee_kind(self):
        config = replace(default_config(), bond_registration=FeeSchedule(kind="sliding"))
        with pytest.raises(ConfigurationError):
            compare(ComparisonInput(), config)

    def test_validation_runs_before_configuration(self):
        config = replace(default_config(), bond_registration=FeeSchedule(kind="sliding"))
        with pytest.raises(InvalidInputError):
            compare(ComparisonInput(deposit_amount=-1), config)


class TestPolicy:
    def test_financed_costs_accrue_opportunity(self):
        inputs = ComparisonInput(include_once_off_in_loan=True)
        plain = compare(inputs, with_policy())
        charged = compare(inputs, with_policy(financed_costs_accrue_opportunity=True))
        total = plain.once_off_costs.total
        assert charged.bond_opp_cost == pytest.approx(
            project_opportunity_cost(180_000 + total, 8.0, 20)
        )
        assert charged.bond_effective_cost > plain.bond_effective_cost

    def test_policy_ignored_when_costs_paid_upfront(self):
        inputs = ComparisonInput(include_once_off_in_loan=False)
        assert compare(inputs, with_policy(financed_costs_accrue_opportunity=True)) == compare(inputs)

    def test_interest_deduction(self):
        inputs = ComparisonInput()
        sunk = compare(inputs)
        deductible = compare(inputs, with_policy(interest_deduction_rate=1.0))
        assert deductible.bond_effective_cost == pytest.approx(
            sunk.bond_effective_cost - sunk.bond_interest_paid
        )

    def test_monthly_compounding(self):
        inputs = ComparisonInput()
        monthly = compare(inputs, with_policy(compounding_periods=12))
        assert monthly.cash_opp_cost > compare(inputs).cash_opp_cost

    def test_tolerance(self):
        inputs = ComparisonInput(opportunity_rate=0)
        gap = compare(inputs).difference
        assert compare(inputs, with_policy(tolerance=gap + 1)).cheaper == "equal"


class TestDecide:
    def test_bond(self):
        assert decide(-5, 0.01) == "bond"

    def test_cash(self):
        assert decide(5, 0.01) == "cash"

    def test_within_tolerance(self):
        assert decide(0.005, 0.01) == "equal"
        assert decide(-0.01, 0.01) == "equal"
