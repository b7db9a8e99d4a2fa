"""Cost configuration: per-tax-year tables and comparison policy.

Configurations are plain values passed into every entry point, so several
tax years can coexist. They load from YAML or JSON files; any section a file
leaves out falls back to the 2025/26 defaults.
"""

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from bondcalc import rates
from bondcalc.brackets import brackets_from_limits
from bondcalc.costs import BASES, FEE_CALCULATORS, LOAN_AMOUNT, FeeSchedule, validate_schedule
from bondcalc.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonPolicy:
    """Conventions for the bond path's effective cost.

    tolerance: differences within this many rand count as "equal".
    compounding_periods: opportunity cost compounding per year (1 = annual,
        12 = monthly).
    financed_costs_accrue_opportunity: when once-off costs are rolled into
        the bond, also charge opportunity cost on them.
    interest_deduction_rate: fraction of bond interest treated as recovered
        (e.g. deductible against rental income). 0 = fully sunk.
    """

    tolerance: float = 0.01
    compounding_periods: int = 1
    financed_costs_accrue_opportunity: bool = False
    interest_deduction_rate: float = 0.0


def _flag(value) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected true or false, got {value!r}")
    return value


_POLICY_TYPES = {
    "tolerance": float,
    "compounding_periods": int,
    "financed_costs_accrue_opportunity": _flag,
    "interest_deduction_rate": float,
}


@dataclass(frozen=True)
class CostConfig:
    """Once-off cost schedules for one tax year."""

    tax_year: str
    jurisdiction: str
    transfer_duty: FeeSchedule
    bond_registration: FeeSchedule
    attorney_fees: FeeSchedule
    other_fees: tuple[FeeSchedule, ...] = ()
    policy: ComparisonPolicy = field(default_factory=ComparisonPolicy)


def default_config() -> CostConfig:
    """South African 2025/26 configuration."""
    return CostConfig(
        tax_year=rates.TAX_YEAR,
        jurisdiction=rates.JURISDICTION,
        transfer_duty=FeeSchedule(
            kind="bracketed",
            brackets=brackets_from_limits(rates.TRANSFER_DUTY_2025),
            label="Transfer duty",
        ),
        bond_registration=FeeSchedule(
            kind="bracketed",
            basis=LOAN_AMOUNT,
            brackets=brackets_from_limits(rates.BOND_REGISTRATION_GUIDELINE),
            label="Bond registration",
        ),
        attorney_fees=FeeSchedule(
            kind="bracketed",
            brackets=brackets_from_limits(rates.ATTORNEY_FEES_GUIDELINE),
            label="Conveyancing",
        ),
        other_fees=(
            FeeSchedule(kind="flat", amount=rates.DEEDS_AND_SUNDRIES, label="Deeds office and sundries"),
        ),
    )


def load_config(path: str | Path) -> CostConfig:
    """Load a cost configuration from a YAML or JSON file."""
    path = Path(path)
    text = path.read_text()

    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    config = dict_to_config(data)
    logger.debug("Loaded %s %s cost configuration from %s", config.jurisdiction, config.tax_year, path)
    return config


def dict_to_schedule(data: dict, name: str) -> FeeSchedule:
    """Convert one fee-schedule mapping to a FeeSchedule."""
    if not isinstance(data, dict) or "kind" not in data:
        raise ConfigurationError(f"Fee schedule '{name}' must be a mapping with a 'kind'")
    kind = data["kind"]
    if not isinstance(kind, str) or kind not in FEE_CALCULATORS:
        raise ConfigurationError(
            f"Unknown fee schedule kind '{kind}' for '{name}'. "
            f"Supported: {list(FEE_CALCULATORS.keys())}"
        )
    basis = data.get("basis", "purchase_price")
    if not isinstance(basis, str) or basis not in BASES:
        raise ConfigurationError(f"Unknown fee basis '{basis}' for '{name}'. Supported: {list(BASES)}")

    brackets = ()
    if kind == "bracketed":
        rows = data.get("brackets")
        if not isinstance(rows, list):
            raise ConfigurationError(f"Bracketed fee schedule '{name}' needs a list of brackets")
        brackets = brackets_from_limits(rows)

    try:
        schedule = FeeSchedule(
            kind=kind,
            basis=basis,
            amount=float(data.get("amount", 0.0)),
            rate=float(data.get("rate", 0.0)),
            brackets=brackets,
            label=str(data.get("label", name)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed fee schedule '{name}': {exc}") from exc
    validate_schedule(schedule)
    return schedule


def dict_to_policy(data: dict) -> ComparisonPolicy:
    """Convert a policy mapping, checking ranges."""
    if not isinstance(data, dict):
        raise ConfigurationError("Comparison policy must be a mapping")
    known = {k: v for k, v in data.items() if hasattr(ComparisonPolicy, k)}
    try:
        for key, convert in _POLICY_TYPES.items():
            if key in known:
                known[key] = convert(known[key])
        policy = ComparisonPolicy(**known)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Malformed comparison policy: {exc}") from exc
    if not math.isfinite(policy.tolerance) or policy.tolerance < 0:
        raise ConfigurationError("Comparison tolerance cannot be negative")
    if policy.compounding_periods < 1:
        raise ConfigurationError("Compounding periods per year must be at least 1")
    if not 0 <= policy.interest_deduction_rate <= 1:
        raise ConfigurationError("Interest deduction rate must be between 0 and 1")
    return policy


def dict_to_config(data: dict) -> CostConfig:
    """Convert a nested dict to CostConfig."""
    base = default_config()

    def schedule(key: str, fallback: FeeSchedule) -> FeeSchedule:
        if key not in data:
            return fallback
        return dict_to_schedule(data[key], key)

    other_fees = base.other_fees
    if "other_fees" in data:
        entries = data["other_fees"] or []
        if not isinstance(entries, list):
            raise ConfigurationError("'other_fees' must be a list of fee schedules")
        other_fees = tuple(
            dict_to_schedule(entry, f"other_fees[{i}]") for i, entry in enumerate(entries)
        )

    policy = dict_to_policy(data.get("policy") or {}) if "policy" in data else base.policy

    return CostConfig(
        tax_year=str(data.get("tax_year", base.tax_year)),
        jurisdiction=str(data.get("jurisdiction", base.jurisdiction)),
        transfer_duty=schedule("transfer_duty", base.transfer_duty),
        bond_registration=schedule("bond_registration", base.bond_registration),
        attorney_fees=schedule("attorney_fees", base.attorney_fees),
        other_fees=other_fees,
        policy=policy,
    )


def schedule_to_dict(schedule: FeeSchedule) -> dict:
    """Convert a FeeSchedule to a serialisable dict in upper-limit form."""
    d = {"kind": schedule.kind, "basis": schedule.basis, "label": schedule.label}
    if schedule.kind == "flat":
        d["amount"] = schedule.amount
    elif schedule.kind == "percentage":
        d["rate"] = schedule.rate
    elif schedule.kind == "bracketed":
        d["brackets"] = [
            {"limit": b.threshold_high, "rate": b.rate, "base_amount": b.base_amount}
            for b in schedule.brackets
        ]
    return d


def config_to_dict(config: CostConfig) -> dict:
    """Convert CostConfig to a serialisable dict."""
    return {
        "tax_year": config.tax_year,
        "jurisdiction": config.jurisdiction,
        "transfer_duty": schedule_to_dict(config.transfer_duty),
        "bond_registration": schedule_to_dict(config.bond_registration),
        "attorney_fees": schedule_to_dict(config.attorney_fees),
        "other_fees": [schedule_to_dict(s) for s in config.other_fees],
        "policy": asdict(config.policy),
    }
