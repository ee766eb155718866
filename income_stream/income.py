"""
Income - Dividend income aggregation and forecasting.

Pure functions over dividend and holding records (dicts as returned by
Database). Callers resolve the USD->HKD rate once and pass it in; nothing
here performs I/O.

Every amount is carried in both currencies. A USD payment adds its amount
to the USD total and amount * rate to the HKD total; an HKD payment adds
its amount to the HKD total and amount / rate to the USD total. The
requested display currency only selects which of the two totals is
reported as display_total.
"""

from datetime import date, timedelta
from typing import Iterable

from income_stream.config.tiers import PAYMENTS_PER_YEAR, WEEKLY_YIELD_MULTIPLIER
from income_stream.currency import convert_amount
from income_stream.exceptions import ValidationError
from income_stream.utils.dates import add_months, month_name, parse_date


def _split_amount(amount: float, currency: str, usd_to_hkd: float) -> tuple[float, float]:
    """(usd, hkd) for an amount in the given currency."""
    currency = currency or "USD"
    return (
        convert_amount(amount, currency, "USD", usd_to_hkd),
        convert_amount(amount, currency, "HKD", usd_to_hkd),
    )


def _display(total_usd: float, total_hkd: float, currency: str) -> float:
    return total_hkd if currency == "HKD" else total_usd


def monthly_income(dividends: Iterable[dict], year: int, currency: str, usd_to_hkd: float) -> dict:
    """Income received per calendar month of one year."""
    buckets = [{"total_usd": 0.0, "total_hkd": 0.0, "dividend_count": 0} for _ in range(12)]

    for dividend in dividends:
        paid = parse_date(dividend.get("payment_date"))
        if paid is None or paid.year != year:
            continue
        usd, hkd = _split_amount(dividend["total_amount"], dividend.get("currency"), usd_to_hkd)
        bucket = buckets[paid.month - 1]
        bucket["total_usd"] += usd
        bucket["total_hkd"] += hkd
        bucket["dividend_count"] += 1

    rows = []
    for index, bucket in enumerate(buckets):
        rows.append(
            {
                "month": month_name(index + 1),
                "month_number": index + 1,
                "total_usd": bucket["total_usd"],
                "total_hkd": bucket["total_hkd"],
                "dividend_count": bucket["dividend_count"],
                "display_total": _display(bucket["total_usd"], bucket["total_hkd"], currency),
                "currency": currency,
            }
        )

    return {
        "year": year,
        "currency": currency,
        "exchange_rate": usd_to_hkd,
        "monthly_income": rows,
        "yearly_total": sum(row["display_total"] for row in rows),
    }


def yearly_income(
    dividends: Iterable[dict], start_year: int, end_year: int, currency: str, usd_to_hkd: float
) -> dict:
    """Income received per calendar year over an inclusive range."""
    if start_year > end_year:
        raise ValidationError("start_year must not be after end_year")

    totals = {
        year: {"total_usd": 0.0, "total_hkd": 0.0, "dividend_count": 0}
        for year in range(start_year, end_year + 1)
    }
    for dividend in dividends:
        paid = parse_date(dividend.get("payment_date"))
        if paid is None or paid.year not in totals:
            continue
        usd, hkd = _split_amount(dividend["total_amount"], dividend.get("currency"), usd_to_hkd)
        entry = totals[paid.year]
        entry["total_usd"] += usd
        entry["total_hkd"] += hkd
        entry["dividend_count"] += 1

    rows = [
        {
            "year": year,
            "total_usd": entry["total_usd"],
            "total_hkd": entry["total_hkd"],
            "dividend_count": entry["dividend_count"],
            "display_total": _display(entry["total_usd"], entry["total_hkd"], currency),
            "currency": currency,
        }
        for year, entry in totals.items()
    ]

    return {
        "start_year": start_year,
        "end_year": end_year,
        "currency": currency,
        "exchange_rate": usd_to_hkd,
        "yearly_income": rows,
        "grand_total": sum(row["display_total"] for row in rows),
    }


def upcoming_dividends(dividends: Iterable[dict], today: date, days: int) -> list[dict]:
    """Dividends paying between today and today + days (inclusive), soonest first."""
    end = today + timedelta(days=days)
    selected = []
    for dividend in dividends:
        paid = parse_date(dividend.get("payment_date"))
        if paid is not None and today <= paid <= end:
            selected.append((paid, dividend))
    selected.sort(key=lambda pair: pair[0])
    return [dividend for _, dividend in selected]


def pays_in_month(frequency: str | None, month: int) -> bool:
    """Whether a stock with this declared frequency pays in a 1-based calendar month."""
    if frequency in ("Monthly", "Weekly"):
        return True
    if frequency == "Quarterly":
        return month % 3 == 0
    if frequency == "Semi-Annual":
        return month in (6, 12)
    if frequency == "Annual":
        return month == 12
    return False


def effective_yield(stock: dict) -> float:
    """Annual yield used for forecasting. Weekly payers are modelled at 4x."""
    annual = stock.get("dividend_yield") or 0.0
    if stock.get("dividend_frequency") == "Weekly":
        return annual * WEEKLY_YIELD_MULTIPLIER
    return annual


def dividend_per_payment(stock: dict) -> float:
    """Forecast dividend per share for one payment."""
    frequency = stock.get("dividend_frequency")
    payments = PAYMENTS_PER_YEAR.get(frequency)
    if not payments:
        return 0.0
    price = stock.get("current_price") or 0.0
    return price * effective_yield(stock) / 100 / payments


def dividend_forecast(
    holdings: Iterable[dict], months: int, currency: str, usd_to_hkd: float, start: date
) -> dict:
    """
    Projected dividend income for the next `months` calendar months,
    beginning with the month containing `start`.

    Holdings whose stock is missing or has no yield contribute nothing.
    Stock records are read, never modified.
    """
    payers = [h for h in holdings if h.get("stock") and h["stock"].get("dividend_yield")]
    first_month = start.replace(day=1)

    forecast = []
    for offset in range(months):
        month_start = add_months(first_month, offset)
        total_usd = 0.0
        total_hkd = 0.0
        contributions = []

        for holding in payers:
            stock = holding["stock"]
            if not pays_in_month(stock.get("dividend_frequency"), month_start.month):
                continue
            per_share = dividend_per_payment(stock)
            amount = per_share * holding.get("shares", 0)
            stock_currency = stock.get("currency") or "USD"
            amount_usd, amount_hkd = _split_amount(amount, stock_currency, usd_to_hkd)
            total_usd += amount_usd
            total_hkd += amount_hkd
            contributions.append(
                {
                    "stock": stock.get("symbol"),
                    "name": stock.get("name"),
                    "shares": holding.get("shares", 0),
                    "dividend_per_share": per_share,
                    "total_amount": amount,
                    "currency": stock_currency,
                    "amount_usd": amount_usd,
                    "amount_hkd": amount_hkd,
                }
            )

        forecast.append(
            {
                "month": month_start.month,
                "month_name": month_name(month_start.month),
                "year": month_start.year,
                "total_usd": total_usd,
                "total_hkd": total_hkd,
                "display_total": _display(total_usd, total_hkd, currency),
                "currency": currency,
                "dividends": contributions,
            }
        )

    return {
        "months": months,
        "currency": currency,
        "exchange_rate": usd_to_hkd,
        "forecast": forecast,
        "total_forecast": sum(row["display_total"] for row in forecast),
    }
