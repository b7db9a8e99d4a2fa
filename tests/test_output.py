"""Tests for parsing and report formatting."""

import pytest
from bondcalc.amortization import amortize, settle_early
from bondcalc.comparison import compare
from bondcalc.config import default_config
from bondcalc.errors import InvalidInputError
from bondcalc.output import (
    fmt,
    full_report,
    parse_amount,
    schedule_table,
    schedule_to_csv,
    settlement_report,
)
from bondcalc.params import ComparisonInput


class TestParseAmount:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1,800,000", 1_800_000),
            ("R 1 800 000", 1_800_000),
            ("R1,800,000.50", 1_800_000.5),
            ("1 800 000", 1_800_000),
            ("  250000 ", 250_000),
            (180_000, 180_000),
        ],
    )
    def test_grouped_text(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "R", "abc", "1.2.3"])
    def test_garbage(self, text):
        with pytest.raises(InvalidInputError):
            parse_amount(text)

    @pytest.mark.parametrize("text", ["nan", "inf", "-inf", "R Infinity", float("nan"), float("inf")])
    def test_non_finite(self, text):
        with pytest.raises(InvalidInputError, match="Not an amount"):
            parse_amount(text)


class TestFmt:
    def test_rands(self):
        assert fmt(21_786) == "R21,786"

    def test_millions(self):
        assert fmt(1_800_000) == "R1.80M"

    def test_negative(self):
        assert fmt(-3_500) == "-R3,500"

    def test_rounds_at_presentation(self):
        assert fmt(17_556.054) == "R17,556"


class TestReports:
    def test_full_report(self):
        inputs = ComparisonInput()
        report = full_report(inputs, compare(inputs), default_config())
        assert "Bond vs Cash Comparison" in report
        assert "R21,786" in report
        assert "ZA 2025/26" in report
        assert "Financing with a bond is cheaper" in report

    def test_cash_verdict(self):
        inputs = ComparisonInput(opportunity_rate=0)
        report = full_report(inputs, compare(inputs), default_config())
        assert "Paying cash is cheaper" in report

    def test_equal_verdict(self):
        inputs = ComparisonInput(deposit_amount=1_800_000)
        report = full_report(inputs, compare(inputs), default_config())
        assert "about the same" in report

    def test_yearly_schedule(self):
        table = schedule_table(amortize(1_000_000, 11, 20))
        # instalment line, header, separator, 20 years, separator, total
        assert len(table.splitlines()) == 25

    def test_monthly_schedule(self):
        table = schedule_table(amortize(1_000_000, 11, 2), monthly=True)
        assert len(table.splitlines()) == 3 + 24 + 2

    def test_csv(self):
        lines = schedule_to_csv(amortize(1_000_000, 11, 20)).splitlines()
        assert lines[0] == "month,payment,interest,principal,balance"
        assert len(lines) == 241
        assert lines[-1].endswith(",0.00")

    def test_settlement_report(self):
        report = settlement_report(settle_early(1_000_000, 11, 20, extra_monthly=2_000))
        assert "Interest saved" in report
        assert "years" in report
