"""
Income Stream Configuration Package

Contains configuration constants and defaults.
"""

from income_stream.config.currencies import (
    DEFAULT_CURRENCY,
    RATE_BASE,
    RATE_QUOTE,
    SUPPORTED_CURRENCIES,
)
from income_stream.config.tiers import (
    DIVIDEND_FREQUENCIES,
    PAYMENTS_PER_YEAR,
    RISK_LEVELS,
    TIER_CATEGORIES,
    TIERS,
)

__all__ = [
    "SUPPORTED_CURRENCIES",
    "DEFAULT_CURRENCY",
    "RATE_BASE",
    "RATE_QUOTE",
    "TIERS",
    "TIER_CATEGORIES",
    "DIVIDEND_FREQUENCIES",
    "PAYMENTS_PER_YEAR",
    "RISK_LEVELS",
]
