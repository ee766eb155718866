"""
Currency - USD/HKD exchange rates and conversion.

Usage:
    currency = Currency()
    rate = await currency.usd_to_hkd()          # persisted or freshly fetched
    result = await currency.convert(100, 'USD', 'HKD')
    await currency.refresh_rates()              # store today's USD->HKD and HKD->USD

Only the USD->HKD rate is ever looked up. HKD->USD is its reciprocal,
and converting a currency to itself is the identity with rate 1.
"""

import logging
from datetime import timedelta

from income_stream.config.currencies import RATE_BASE, RATE_QUOTE, RATE_SOURCE, SUPPORTED_CURRENCIES, yahoo_fx_symbol
from income_stream.database import Database
from income_stream.exceptions import CurrencyConversionError, QuoteProviderError
from income_stream.quotes import QuoteProvider
from income_stream.settings import Settings
from income_stream.utils.dates import utc_now

logger = logging.getLogger(__name__)


def validate_currency(code: str | None, default: str | None = None) -> str:
    """Normalize a currency code, rejecting anything but USD and HKD."""
    if code is None or code == "":
        if default is None:
            raise CurrencyConversionError("(none)", reason="Only USD and HKD are supported.")
        code = default
    normalized = str(code).strip().upper()
    if normalized not in SUPPORTED_CURRENCIES:
        raise CurrencyConversionError(str(code), reason="Only USD and HKD are supported.")
    return normalized


def directional_rate(from_currency: str, to_currency: str, usd_to_hkd: float) -> float:
    """Rate for a pair given the single USD->HKD rate."""
    if from_currency == to_currency:
        return 1.0
    if usd_to_hkd <= 0:
        raise CurrencyConversionError(from_currency, to_currency, "exchange rate must be positive")
    if from_currency == RATE_BASE and to_currency == RATE_QUOTE:
        return usd_to_hkd
    return 1.0 / usd_to_hkd


def convert_amount(amount: float, from_currency: str, to_currency: str, usd_to_hkd: float) -> float:
    """Convert between USD and HKD with the given USD->HKD rate."""
    if from_currency == to_currency:
        return amount
    if from_currency == RATE_BASE:
        return amount * usd_to_hkd
    return amount / usd_to_hkd


class Currency:
    """Resolves and stores USD/HKD exchange rates."""

    _instance: "Currency | None" = None
    _db: "Database"
    _settings: "Settings"
    _provider: "QuoteProvider"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._db = Database()
            cls._instance._settings = Settings()
            cls._instance._provider = QuoteProvider()
        return cls._instance

    def __init__(self):
        pass  # All init done in __new__

    @classmethod
    def _clear(cls) -> None:
        cls._instance = None

    async def current_rate_record(self) -> dict:
        """
        The USD->HKD rate record to use right now.

        A stored rate younger than 'rate_freshness_hours' is reused;
        otherwise the provider is asked and the answer persisted.
        """
        hours = await self._settings.get("rate_freshness_hours")
        since = (utc_now() - timedelta(hours=float(hours))).isoformat()
        record = await self._db.get_latest_rate(RATE_BASE, RATE_QUOTE, since=since)
        if record:
            return record

        rate = await self._provider.get_exchange_rate(RATE_BASE, RATE_QUOTE)
        if rate <= 0:
            raise QuoteProviderError(yahoo_fx_symbol(RATE_BASE, RATE_QUOTE), "non-positive exchange rate")
        logger.info(f"Stored new {RATE_BASE}/{RATE_QUOTE} rate {rate}")
        return await self._db.save_rate(RATE_BASE, RATE_QUOTE, rate, utc_now().isoformat(), RATE_SOURCE)

    async def usd_to_hkd(self) -> float:
        record = await self.current_rate_record()
        return record["rate"]

    async def get_rate(self, from_currency: str, to_currency: str) -> dict:
        """Rate for a pair. Same-currency pairs do not touch storage or the provider."""
        from_currency = validate_currency(from_currency)
        to_currency = validate_currency(to_currency)
        if from_currency == to_currency:
            return {
                "from_currency": from_currency,
                "to_currency": to_currency,
                "rate": 1.0,
                "date": utc_now().isoformat(),
                "source": "identity",
            }

        record = await self.current_rate_record()
        return {
            "from_currency": from_currency,
            "to_currency": to_currency,
            "rate": directional_rate(from_currency, to_currency, record["rate"]),
            "date": record["date"],
            "source": record["source"],
        }

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> dict:
        rate = await self.get_rate(from_currency, to_currency)
        return {
            "from_currency": rate["from_currency"],
            "to_currency": rate["to_currency"],
            "original_amount": amount,
            "converted_amount": amount * rate["rate"],
            "rate": rate["rate"],
            "date": rate["date"],
        }

    async def history(self, from_currency: str, to_currency: str, days: int = 30) -> list[dict]:
        """Stored rates for a pair over the last N days, oldest first."""
        from_currency = validate_currency(from_currency)
        to_currency = validate_currency(to_currency)
        since = (utc_now() - timedelta(days=days)).isoformat()
        return await self._db.get_rate_history(from_currency, to_currency, since)

    async def refresh_rates(self) -> dict:
        """
        Fetch USD->HKD from the provider and store it with its reciprocal.

        Today's records are updated in place when they already exist.
        """
        rate = await self._provider.get_exchange_rate(RATE_BASE, RATE_QUOTE)
        if rate <= 0:
            raise QuoteProviderError(yahoo_fx_symbol(RATE_BASE, RATE_QUOTE), "non-positive exchange rate")
        now = utc_now()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0).isoformat()
        stamp = now.isoformat()

        usd_to_hkd = await self._db.upsert_daily_rate(RATE_BASE, RATE_QUOTE, rate, stamp, day_start, RATE_SOURCE)
        hkd_to_usd = await self._db.upsert_daily_rate(RATE_QUOTE, RATE_BASE, 1.0 / rate, stamp, day_start, RATE_SOURCE)
        logger.info(f"Exchange rates refreshed: {RATE_BASE}/{RATE_QUOTE} = {rate}")
        return {"usd_to_hkd": usd_to_hkd, "hkd_to_usd": hkd_to_usd}
