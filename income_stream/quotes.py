"""
Quote Provider - Market data from Yahoo Finance with a weekly in-memory cache.

Usage:
    provider = QuoteProvider()
    quote = await provider.get_quote('CLM')
    quote['regular_market_price']
    quotes = await provider.get_batch_quotes(['CLM', 'CRF'])
    rate = await provider.get_exchange_rate('USD', 'HKD')

Cache keys are namespaced: quote_<SYMBOL>, dividends_<SYMBOL>,
exchange_<FROM>_<TO>. Quotes change slowly for these funds, so entries
live for 'quote_cache_ttl_days' (7 by default).
"""

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import yfinance as yf

from income_stream.cache import Cache
from income_stream.config.currencies import yahoo_fx_symbol
from income_stream.config.tiers import DEFAULT_FREQUENCY
from income_stream.exceptions import QuoteProviderError
from income_stream.utils.dates import add_months

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60

# Estimated payment schedule per declared frequency: (payments per year, months between payments).
# Weekly payers are spaced in weeks instead (see _estimate_dates).
ESTIMATE_SCHEDULE = {
    "Weekly": (52, None),
    "Monthly": (12, 1),
    "Quarterly": (4, 3),
    "Semi-Annual": (2, 6),
    "Annual": (1, 12),
}


def _first(info: dict, *keys):
    for key in keys:
        value = info.get(key)
        if value is not None:
            return value
    return None


def _normalize_quote(symbol: str, info: dict) -> dict:
    """Reduce a yfinance info dict to the fields the application uses."""
    price = _first(info, "regularMarketPrice", "currentPrice", "previousClose")
    if price is None:
        raise QuoteProviderError(symbol, "no market price available")

    ex_dividend = info.get("exDividendDate")
    if isinstance(ex_dividend, (int, float)):
        ex_dividend = datetime.fromtimestamp(ex_dividend, tz=timezone.utc).date().isoformat()

    return {
        "symbol": symbol,
        "name": _first(info, "longName", "shortName"),
        "regular_market_price": float(price),
        "previous_close": info.get("previousClose"),
        "currency": info.get("currency"),
        "dividend_rate": _first(info, "dividendRate", "trailingAnnualDividendRate"),
        "dividend_yield": _first(info, "dividendYield", "trailingAnnualDividendYield"),
        "ex_dividend_date": ex_dividend,
        "fetched_at": datetime.now(timezone.utc).isoformat(),
    }


def _estimate_dates(frequency: str, start: date) -> list[date]:
    count, months = ESTIMATE_SCHEDULE[frequency]
    if months is None:
        return [start + timedelta(weeks=i + 1) for i in range(count)]
    return [add_months(start, months * (i + 1)) for i in range(count)]


class QuoteProvider:
    """Cached access to Yahoo Finance quotes, dividend estimates and FX rates."""

    _instance: "QuoteProvider | None" = None
    _cache: "Cache"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._cache = Cache("quotes", ttl_seconds=DEFAULT_TTL_SECONDS)
        return cls._instance

    def __init__(self):
        pass  # All init done in __new__

    @classmethod
    def _clear(cls) -> None:
        cls._instance = None

    def set_cache_ttl_days(self, days: float) -> None:
        self._cache.set_ttl(int(days * 24 * 60 * 60))

    async def _fetch_info(self, symbol: str) -> dict:
        try:
            ticker = yf.Ticker(symbol)
            info = await asyncio.to_thread(lambda: ticker.info)
        except Exception as e:
            raise QuoteProviderError(symbol, str(e)) from e
        if not info:
            raise QuoteProviderError(symbol, "empty response")
        return info

    async def get_quote(self, symbol: str) -> dict:
        """Quote for one symbol. Raises QuoteProviderError when it cannot be resolved."""
        cache_key = f"quote_{symbol}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Using cached quote for {symbol}")
            return cached

        logger.info(f"Fetching fresh quote for {symbol}")
        quote = _normalize_quote(symbol, await self._fetch_info(symbol))
        self._cache.set(cache_key, quote)
        return quote

    async def get_price(self, symbol: str) -> float:
        quote = await self.get_quote(symbol)
        return quote["regular_market_price"]

    async def get_batch_quotes(self, symbols: list[str]) -> dict[str, dict]:
        """
        Quotes for several symbols, keyed by symbol.

        Symbols the provider cannot resolve are left out of the result
        rather than failing the whole batch.
        """
        result = {}
        for symbol in symbols:
            try:
                result[symbol] = await self.get_quote(symbol)
            except QuoteProviderError as e:
                logger.warning(f"Skipping {symbol} in batch quote: {e}")
        return result

    async def get_dividend_estimates(self, symbol: str, frequency: Optional[str] = None) -> list[dict]:
        """
        Estimated upcoming dividend payments over the next year.

        Built from the provider's annual dividend rate split evenly across
        the stock's declared payment frequency. Returns an empty list for
        non-payers or when the provider has no dividend data.
        """
        frequency = frequency or DEFAULT_FREQUENCY
        cache_key = f"dividends_{symbol}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Using cached dividend estimates for {symbol}")
            return cached

        logger.info(f"Fetching fresh dividend data for {symbol}")
        quote = await self.get_quote(symbol)
        estimates = []
        annual_rate = quote.get("dividend_rate")
        if annual_rate and quote.get("dividend_yield") and frequency in ESTIMATE_SCHEDULE:
            payments, _ = ESTIMATE_SCHEDULE[frequency]
            amount = annual_rate / payments
            for pay_date in _estimate_dates(frequency, date.today()):
                estimates.append(
                    {
                        "symbol": symbol,
                        "date": pay_date.isoformat(),
                        "amount": amount,
                        "estimated": True,
                    }
                )

        self._cache.set(cache_key, estimates)
        return estimates

    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> float:
        """Spot FX rate from the provider (1 from_currency = rate to_currency)."""
        cache_key = f"exchange_{from_currency}_{to_currency}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Using cached exchange rate for {from_currency}/{to_currency}")
            return cached

        logger.info(f"Fetching fresh exchange rate for {from_currency}/{to_currency}")
        symbol = yahoo_fx_symbol(from_currency, to_currency)
        info = await self._fetch_info(symbol)
        rate = _first(info, "regularMarketPrice", "bid", "previousClose")
        if rate is None:
            raise QuoteProviderError(symbol, "no exchange rate available")
        rate = float(rate)
        if rate <= 0:
            raise QuoteProviderError(symbol, f"non-positive exchange rate {rate}")
        self._cache.set(cache_key, rate)
        return rate

    async def refresh(self, symbol: str) -> dict:
        """Drop cached data for a symbol and fetch a fresh quote."""
        self._cache.invalidate(f"quote_{symbol}")
        self._cache.invalidate(f"dividends_{symbol}")
        return await self.get_quote(symbol)

    def clear_cache(self) -> int:
        cleared = self._cache.clear()
        logger.info(f"Quote cache cleared ({cleared} entries)")
        return cleared

    def cache_stats(self) -> dict:
        return self._cache.stats()
