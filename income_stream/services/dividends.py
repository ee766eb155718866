"""Dividend service: payment records and income reports."""

from __future__ import annotations

import logging
from datetime import date

from income_stream.currency import Currency, validate_currency
from income_stream.database import Database
from income_stream.exceptions import DividendNotFoundError, StockNotFoundError, ValidationError
from income_stream.income import dividend_forecast, monthly_income, upcoming_dividends, yearly_income
from income_stream.settings import Settings
from income_stream.utils.dates import parse_date

logger = logging.getLogger(__name__)


def _iso_date(value) -> str:
    return parse_date(value).isoformat()


class DividendService:
    """Service for dividend records and the income views built on them."""

    def __init__(
        self,
        db: Database | None = None,
        currency: Currency | None = None,
        settings: Settings | None = None,
    ):
        self._db = db or Database()
        self._currency = currency or Currency()
        self._settings = settings or Settings()

    async def _display_currency(self, currency: str | None) -> str:
        return validate_currency(currency, default=await self._settings.get("default_currency"))

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    async def list_dividends(self) -> list[dict]:
        return await self._db.get_dividends()

    async def dividends_for_stock(self, stock_id: int) -> list[dict]:
        return await self._db.get_dividends(stock_id=stock_id)

    async def get_dividend(self, dividend_id: int) -> dict:
        dividend = await self._db.get_dividend(dividend_id)
        if dividend is None:
            raise DividendNotFoundError(dividend_id)
        return dividend

    async def add_dividend(self, data: dict) -> dict:
        """Record a payment. total_amount is always amount_per_share * shares."""
        if await self._db.get_stock(data["stock_id"]) is None:
            raise StockNotFoundError(data["stock_id"])

        record = {
            "stock_id": data["stock_id"],
            "ex_date": _iso_date(data["ex_date"]),
            "payment_date": _iso_date(data["payment_date"]),
            "amount_per_share": data["amount_per_share"],
            "shares": data["shares"],
            "total_amount": data["amount_per_share"] * data["shares"],
            "currency": validate_currency(data.get("currency"), default="USD"),
            "reinvested": bool(data.get("reinvested") or False),
            "notes": data.get("notes"),
        }
        return await self._db.insert_dividend(record)

    async def update_dividend(self, dividend_id: int, data: dict) -> dict:
        """Apply a partial update and recompute total_amount."""
        dividend = await self.get_dividend(dividend_id)
        changes = {k: v for k, v in data.items() if v is not None}

        for key in ("ex_date", "payment_date"):
            if key in changes:
                changes[key] = _iso_date(changes[key])
        if "currency" in changes:
            changes["currency"] = validate_currency(changes["currency"])
        if "reinvested" in changes:
            changes["reinvested"] = bool(changes["reinvested"])

        amount = changes.get("amount_per_share", dividend["amount_per_share"])
        shares = changes.get("shares", dividend["shares"])
        changes["total_amount"] = amount * shares
        return await self._db.update_dividend(dividend_id, changes)

    async def delete_dividend(self, dividend_id: int) -> None:
        await self.get_dividend(dividend_id)
        await self._db.delete_dividend(dividend_id)

    # -------------------------------------------------------------------------
    # Income views
    # -------------------------------------------------------------------------

    async def monthly_income(self, year: int | None = None, currency: str | None = None) -> dict:
        year = year or date.today().year
        currency = await self._display_currency(currency)
        rate = await self._currency.usd_to_hkd()
        dividends = await self._db.get_dividends_paid_between(f"{year:04d}-01-01", f"{year:04d}-12-31")
        return monthly_income(dividends, year, currency, rate)

    async def yearly_income(
        self, start_year: int | None = None, end_year: int | None = None, currency: str | None = None
    ) -> dict:
        end_year = end_year or date.today().year
        if start_year is None:
            start_year = end_year - int(await self._settings.get("income_history_years"))
        if start_year > end_year:
            raise ValidationError("start_year must not be after end_year")
        currency = await self._display_currency(currency)
        rate = await self._currency.usd_to_hkd()
        dividends = await self._db.get_dividends_paid_between(f"{start_year:04d}-01-01", f"{end_year:04d}-12-31")
        return yearly_income(dividends, start_year, end_year, currency, rate)

    async def upcoming(self, days: int | None = None) -> list[dict]:
        if days is None:
            days = int(await self._settings.get("upcoming_days"))
        today = date.today()
        dividends = await self._db.get_dividends_paid_between(today.isoformat(), "9999-12-31")
        return upcoming_dividends(dividends, today, days)

    async def forecast(self, months: int | None = None, currency: str | None = None) -> dict:
        if months is None:
            months = int(await self._settings.get("forecast_months"))
        currency = await self._display_currency(currency)
        rate = await self._currency.usd_to_hkd()
        holdings = await self._db.get_holdings()
        return dividend_forecast(holdings, months, currency, rate, date.today())
