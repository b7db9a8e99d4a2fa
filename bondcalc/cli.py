"""CLI entry point for the bond vs cash calculator."""

import argparse
import sys

import yaml

from bondcalc.amortization import amortize, max_affordable_loan, settle_early
from bondcalc.comparison import compare
from bondcalc.config import CostConfig, config_to_dict, default_config, load_config
from bondcalc.costs import aggregate_once_off_costs
from bondcalc.errors import BondCalcError
from bondcalc.logs import setup_logging
from bondcalc.output import (
    fmt,
    full_report,
    once_off_table,
    parse_amount,
    schedule_table,
    schedule_to_csv,
    settlement_report,
)
from bondcalc.params import ComparisonInput
from bondcalc.sensitivity import format_sweep, frange, sweep
from bondcalc.settings import Settings
from bondcalc.telemetry import RESULT_GENERATED, TelemetryRecorder


def _config(args: argparse.Namespace) -> CostConfig:
    if getattr(args, "config", None):
        return load_config(args.config)
    return default_config()


def _scenario(args: argparse.Namespace) -> ComparisonInput:
    return ComparisonInput(
        purchase_price=args.price,
        deposit_amount=args.deposit,
        annual_interest_rate=args.rate,
        loan_term_years=args.term,
        opportunity_rate=args.opportunity_rate,
        include_once_off_in_loan=args.finance_costs,
    )


def cmd_compare(args: argparse.Namespace, settings: Settings) -> None:
    """Compare bond and cash for one scenario."""
    config = _config(args)
    inputs = _scenario(args)
    result = compare(inputs, config)

    print(full_report(inputs, result, config))
    if args.schedule and result.financed_amount > 0:
        print()
        print(schedule_table(amortize(result.financed_amount, inputs.annual_interest_rate, inputs.loan_term_years)))

    if args.no_telemetry:
        return
    with TelemetryRecorder.from_settings(settings) as recorder:
        recorder.record(RESULT_GENERATED, inputs)


def cmd_schedule(args: argparse.Namespace, settings: Settings) -> None:
    """Print an amortization schedule."""
    amortization = amortize(args.principal, args.rate, args.term)
    if args.csv:
        print(schedule_to_csv(amortization), end="")
    else:
        print(schedule_table(amortization, monthly=args.monthly))


def cmd_costs(args: argparse.Namespace, settings: Settings) -> None:
    """Print once-off costs for a purchase."""
    config = _config(args)
    loan = args.loan if args.loan is not None else 0.0
    costs = aggregate_once_off_costs(args.price, loan, config)
    print(f"Purchase price {fmt(args.price)}, loan {fmt(loan)} ({config.jurisdiction} {config.tax_year})")
    print(once_off_table(costs))


def cmd_settle(args: argparse.Namespace, settings: Settings) -> None:
    """Show the effect of paying extra into a bond."""
    settlement = settle_early(
        args.principal,
        args.rate,
        args.term,
        extra_monthly=args.extra,
        lump_sum=args.lump_sum,
        lump_sum_month=args.lump_sum_month,
    )
    print(settlement_report(settlement))


def cmd_afford(args: argparse.Namespace, settings: Settings) -> None:
    """Largest bond the monthly surplus can service."""
    loan = max_affordable_loan(args.income, args.expenses, args.rate, args.term)
    print(f"Maximum affordable loan: {fmt(loan)}")


def cmd_sensitivity(args: argparse.Namespace, settings: Settings) -> None:
    """Run sensitivity analysis on one input."""
    parts = args.range.split(",")
    if len(parts) != 3:
        print("Error: --range must be start,stop,step (e.g., 6,14,1)", file=sys.stderr)
        sys.exit(1)

    start, stop, step = float(parts[0]), float(parts[1]), float(parts[2])
    results = sweep(_scenario(args), args.param, frange(start, stop, step), _config(args))
    print(format_sweep(args.param, results))


def cmd_defaults(args: argparse.Namespace, settings: Settings) -> None:
    """Print the default cost configuration as YAML."""
    print(yaml.dump(config_to_dict(default_config()), default_flow_style=False, sort_keys=False))


def _add_scenario_args(parser: argparse.ArgumentParser) -> None:
    d = ComparisonInput()
    parser.add_argument("--config", help="YAML/JSON cost configuration")
    parser.add_argument("--price", type=parse_amount, default=d.purchase_price, help="Purchase price (e.g. 1,800,000)")
    parser.add_argument("--deposit", type=parse_amount, default=d.deposit_amount, help="Deposit amount")
    parser.add_argument("--rate", type=float, default=d.annual_interest_rate, help="Bond rate, %% p.a.")
    parser.add_argument("--term", type=int, default=d.loan_term_years, help="Loan term in years")
    parser.add_argument(
        "--opportunity-rate", type=float, default=d.opportunity_rate,
        help="Return the cash could earn elsewhere, %% p.a.",
    )
    parser.add_argument(
        "--finance-costs", action="store_true", help="Roll once-off costs into the bond"
    )


def _add_loan_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--principal", type=parse_amount, required=True, help="Loan amount")
    parser.add_argument("--rate", type=float, required=True, help="Bond rate, %% p.a.")
    parser.add_argument("--term", type=int, default=20, help="Loan term in years")


COMMANDS = {
    "compare": cmd_compare,
    "schedule": cmd_schedule,
    "costs": cmd_costs,
    "settle": cmd_settle,
    "afford": cmd_afford,
    "sensitivity": cmd_sensitivity,
    "defaults": cmd_defaults,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="South African bond vs cash property finance calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  bondcalc compare                                   # Site defaults
  bondcalc compare --price 2,500,000 --deposit 250,000 --rate 11.25
  bondcalc compare --config configs/za_2025_26.yaml --finance-costs
  bondcalc schedule --principal 1,620,000 --rate 11.75 --term 20
  bondcalc costs --price 1,800,000 --loan 1,620,000
  bondcalc settle --principal 1,000,000 --rate 11 --extra 2,000
  bondcalc afford --income 60,000 --expenses 35,000 --rate 11.75
  bondcalc sensitivity --param opportunity_rate --range 4,12,1
  bondcalc defaults                                  # Print default config
""",
    )
    parser.add_argument("--log-level", help="Logging level (default from BONDCALC_LOG_LEVEL)")
    parser.add_argument("--log-json", action="store_true", help="Log as JSON lines")

    subparsers = parser.add_subparsers(dest="command")

    compare_parser = subparsers.add_parser("compare", help="Compare bond vs cash")
    _add_scenario_args(compare_parser)
    compare_parser.add_argument("--schedule", action="store_true", help="Also print the yearly schedule")
    compare_parser.add_argument("--no-telemetry", action="store_true", help="Do not send analytics")

    schedule_parser = subparsers.add_parser("schedule", help="Amortization schedule")
    _add_loan_args(schedule_parser)
    schedule_parser.add_argument("--monthly", action="store_true", help="Month-by-month rows")
    schedule_parser.add_argument("--csv", action="store_true", help="Output as CSV")

    costs_parser = subparsers.add_parser("costs", help="Once-off purchase costs")
    costs_parser.add_argument("--price", type=parse_amount, required=True, help="Purchase price")
    costs_parser.add_argument("--loan", type=parse_amount, help="Loan amount (omit for cash)")
    costs_parser.add_argument("--config", help="YAML/JSON cost configuration")

    settle_parser = subparsers.add_parser("settle", help="Early settlement savings")
    _add_loan_args(settle_parser)
    settle_parser.add_argument("--extra", type=parse_amount, default=0.0, help="Extra paid each month")
    settle_parser.add_argument("--lump-sum", type=parse_amount, default=0.0, help="Once-off extra payment")
    settle_parser.add_argument(
        "--lump-sum-month", type=int, default=0, help="Instalments made before the lump sum"
    )

    afford_parser = subparsers.add_parser("afford", help="Maximum affordable loan")
    afford_parser.add_argument("--income", type=parse_amount, required=True, help="Monthly income")
    afford_parser.add_argument("--expenses", type=parse_amount, required=True, help="Monthly expenses")
    afford_parser.add_argument("--rate", type=float, required=True, help="Bond rate, %% p.a.")
    afford_parser.add_argument("--term", type=int, default=20, help="Loan term in years")

    sens_parser = subparsers.add_parser("sensitivity", help="Input sensitivity analysis")
    _add_scenario_args(sens_parser)
    sens_parser.add_argument("--param", required=True, help="Input field (e.g., opportunity_rate)")
    sens_parser.add_argument("--range", required=True, help="start,stop,step (e.g., 4,12,1)")

    subparsers.add_parser("defaults", help="Print default cost configuration")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    command = COMMANDS.get(args.command)

    try:
        setup_logging(args.log_level or settings.log_level, json_format=args.log_json or settings.log_json)
        if command is None:
            parser.print_help()
            return
        command(args, settings)
    except (BondCalcError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
