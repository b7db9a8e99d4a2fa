"""South African once-off cost tables, 2025/26 tax year.

Plain data in upper-limit form (see ``brackets.brackets_from_limits``).
A later tax year gets its own config file; these are only the defaults.
"""

TAX_YEAR = "2025/26"
JURISDICTION = "ZA"

# SARS transfer duty (natural and juristic persons), effective 1 April 2025.
TRANSFER_DUTY_2025 = [
    {"limit": 1_210_000, "rate": 0.00, "base_amount": 0},
    {"limit": 1_663_800, "rate": 0.03, "base_amount": 0},
    {"limit": 2_329_300, "rate": 0.06, "base_amount": 13_614},
    {"limit": 2_994_800, "rate": 0.08, "base_amount": 53_544},
    {"limit": 13_310_000, "rate": 0.11, "base_amount": 106_784},
    {"limit": None, "rate": 0.13, "base_amount": 1_241_456},
]

# Conveyancing (transfer attorney) fee guideline. Estimates, not regulated.
ATTORNEY_FEES_GUIDELINE = [
    {"limit": 100_000, "rate": 0.0, "base_amount": 7_000},
    {"limit": 500_000, "rate": 0.0, "base_amount": 15_000},
    {"limit": 1_000_000, "rate": 0.0, "base_amount": 25_000},
    {"limit": 2_000_000, "rate": 0.0, "base_amount": 35_000},
    {"limit": 5_000_000, "rate": 0.0, "base_amount": 50_000},
    {"limit": None, "rate": 0.005, "base_amount": 65_000},  # + 0.5% above R5m
]

# Bond registration attorney fee guideline, applied to the loan amount.
BOND_REGISTRATION_GUIDELINE = [
    {"limit": 100_000, "rate": 0.0, "base_amount": 7_000},
    {"limit": 500_000, "rate": 0.0, "base_amount": 15_000},
    {"limit": 1_000_000, "rate": 0.0, "base_amount": 25_000},
    {"limit": 2_000_000, "rate": 0.0, "base_amount": 35_000},
    {"limit": 5_000_000, "rate": 0.0, "base_amount": 50_000},
    {"limit": None, "rate": 0.005, "base_amount": 65_000},
]

# Deeds office and sundries, flat.
DEEDS_AND_SUNDRIES = 5_000
