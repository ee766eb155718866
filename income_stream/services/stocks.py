"""Stock catalog service: CRUD, catalog seeding and price refresh."""

from __future__ import annotations

import logging

from income_stream.config.catalog import ADDITIONAL_STOCKS, ADDITIONAL_STOCKS_MARKER, INITIAL_CATALOG
from income_stream.config.tiers import tier_category
from income_stream.database import Database
from income_stream.exceptions import StockNotFoundError, ValidationError
from income_stream.quotes import QuoteProvider
from income_stream.rebalance import validate_tier
from income_stream.utils.dates import utc_now_iso
from income_stream.utils.strings import normalize_symbol

logger = logging.getLogger(__name__)


class StockService:
    """Service for the stock catalog."""

    def __init__(self, db: Database | None = None, quotes: QuoteProvider | None = None):
        self._db = db or Database()
        self._quotes = quotes or QuoteProvider()

    async def list_stocks(self) -> list[dict]:
        return await self._db.get_stocks()

    async def get_stock(self, stock_id: int) -> dict:
        stock = await self._db.get_stock(stock_id)
        if stock is None:
            raise StockNotFoundError(stock_id)
        return stock

    async def stocks_by_tier(self, tier: int) -> list[dict]:
        return await self._db.get_stocks(tier=validate_tier(tier))

    async def add_stock(self, data: dict) -> dict:
        """
        Add a stock to the catalog at its current market price.

        Raises ValidationError if the symbol is already tracked. A failed
        price lookup propagates as QuoteProviderError.
        """
        symbol = normalize_symbol(data["symbol"])
        if await self._db.get_stock_by_symbol(symbol):
            raise ValidationError("Stock already exists")

        tier = validate_tier(data["tier"])
        price = await self._quotes.get_price(symbol)

        record = {k: v for k, v in data.items() if v is not None}
        record.update(
            symbol=symbol,
            tier=tier,
            tier_category=data.get("tier_category") or tier_category(tier),
            current_price=price,
            currency=data.get("currency") or "USD",
            last_updated=utc_now_iso(),
        )
        stock = await self._db.insert_stock(record)
        logger.info(f"Added stock {symbol} (tier {tier}) at {price}")
        return stock

    async def update_stock(self, stock_id: int, data: dict) -> dict:
        """Apply a partial update. Omitted fields keep their values."""
        stock = await self.get_stock(stock_id)
        changes = dict(data)

        if "symbol" in changes:
            changes["symbol"] = normalize_symbol(changes["symbol"])
            if changes["symbol"] != stock["symbol"] and await self._db.get_stock_by_symbol(changes["symbol"]):
                raise ValidationError("Stock already exists")
        if "tier" in changes:
            validate_tier(changes["tier"])
            changes.setdefault("tier_category", tier_category(changes["tier"]))

        if not changes:
            return stock
        changes["last_updated"] = utc_now_iso()
        return await self._db.update_stock(stock_id, changes)

    async def delete_stock(self, stock_id: int) -> None:
        """Delete a stock. Refused while any holding or dividend still references it."""
        stock = await self.get_stock(stock_id)
        refs = await self._db.count_stock_references(stock_id)
        if refs["holdings"] or refs["dividends"]:
            raise ValidationError(
                f"Stock {stock['symbol']} is still referenced by holdings or dividends",
                holdings=refs["holdings"],
                dividends=refs["dividends"],
            )
        await self._db.delete_stock(stock_id)
        logger.info(f"Deleted stock {stock['symbol']}")

    async def initialize_catalog(self) -> int:
        """
        Load the built-in catalog with live prices.

        Only allowed on an empty catalog. Symbols without a quote are
        stored at price 0.
        """
        existing = await self._db.count_stocks()
        if existing > 0:
            raise ValidationError("Stocks already initialized", count=existing)

        symbols = [entry["symbol"] for entry in INITIAL_CATALOG]
        quotes = await self._quotes.get_batch_quotes(symbols)
        now = utc_now_iso()
        records = []
        for entry in INITIAL_CATALOG:
            quote = quotes.get(entry["symbol"])
            records.append(
                {
                    **entry,
                    "current_price": quote["regular_market_price"] if quote else 0,
                    "last_updated": now,
                }
            )
        count = await self._db.insert_stocks(records)
        logger.info(f"Initialized catalog with {count} stocks ({len(quotes)} priced)")
        return count

    async def seed_additional_stocks(self) -> int:
        """Add the extended stock list once. Its marker symbol shows it was already added."""
        if await self._db.get_stock_by_symbol(ADDITIONAL_STOCKS_MARKER):
            return 0

        now = utc_now_iso()
        records = []
        for entry in ADDITIONAL_STOCKS:
            if await self._db.get_stock_by_symbol(entry["symbol"]):
                continue
            records.append({**entry, "last_updated": now})
        count = await self._db.insert_stocks(records)
        logger.info(f"Seeded {count} additional stocks")
        return count

    async def update_prices(self) -> dict:
        """Refresh every stock's price. Symbols the provider cannot quote keep their old price."""
        stocks = await self._db.get_stocks()
        quotes = await self._quotes.get_batch_quotes([s["symbol"] for s in stocks])
        now = utc_now_iso()
        updated = 0
        for stock in stocks:
            quote = quotes.get(stock["symbol"])
            if quote is None:
                continue
            await self._db.update_stock(
                stock["id"], {"current_price": quote["regular_market_price"], "last_updated": now}
            )
            updated += 1
        logger.info(f"Stock price refresh: {updated}/{len(stocks)} updated")
        return {"updated": updated, "skipped": len(stocks) - updated}
