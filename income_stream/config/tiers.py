"""
Tier Configuration - Portfolio tiers, dividend frequencies and risk levels.

Tier 1 holds the anchor funds (lower risk), tier 2 the index-based option
income funds (higher yield), tier 3 the high-yield funds (highest risk and
NAV decay).
"""

TIERS = (1, 2, 3)

TIER_CATEGORIES = {
    1: "Anchor Funds",
    2: "Index-Based Funds",
    3: "High-Yield Funds",
}

# Declared payout frequencies. "None" marks non-dividend stocks.
DIVIDEND_FREQUENCIES = ["Weekly", "Monthly", "Quarterly", "Semi-Annual", "Annual", "None"]

DEFAULT_FREQUENCY = "Quarterly"

# Payments per year used to split the annual dividend. Weekly payers are
# modelled as monthly payments of a 4x yield.
PAYMENTS_PER_YEAR = {
    "Weekly": 12,
    "Monthly": 12,
    "Quarterly": 4,
    "Semi-Annual": 2,
    "Annual": 1,
}

WEEKLY_YIELD_MULTIPLIER = 4

RISK_LEVELS = ["Low", "Moderate", "High", "Very High"]

DEFAULT_RISK_LEVEL = "Moderate"


def tier_category(tier: int) -> str:
    """Get the category name for a tier (defaults to tier 1's)."""
    return TIER_CATEGORIES.get(tier, TIER_CATEGORIES[1])
