"""
Income Stream Utilities Package

Shared helpers used across services and routers.
"""

from income_stream.utils.dates import add_months, month_name, parse_date, utc_now, utc_now_iso
from income_stream.utils.decorators import singleton
from income_stream.utils.strings import normalize_symbol, parse_csv_field

__all__ = [
    "singleton",
    "parse_csv_field",
    "normalize_symbol",
    "parse_date",
    "month_name",
    "add_months",
    "utc_now",
    "utc_now_iso",
]
