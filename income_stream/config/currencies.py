"""
Currency Configuration - Single source of truth for supported currencies.
"""

# All currencies supported by the system
SUPPORTED_CURRENCIES = ["USD", "HKD"]

DEFAULT_CURRENCY = "USD"

# The only rate ever looked up. HKD -> USD is always its reciprocal.
RATE_BASE = "USD"
RATE_QUOTE = "HKD"

RATE_SOURCE = "Yahoo Finance"


def yahoo_fx_symbol(from_currency: str, to_currency: str) -> str:
    """Yahoo Finance ticker for an FX pair, e.g. USDHKD=X."""
    return f"{from_currency.upper()}{to_currency.upper()}=X"
