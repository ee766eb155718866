"""Portfolio service: the portfolio record, holdings, rebalancing and tiers."""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from income_stream.database import Database
from income_stream.exceptions import HoldingNotFoundError, StockNotFoundError
from income_stream.quotes import QuoteProvider
from income_stream.rebalance import (
    allocation_percentages,
    rebalance_recommendations,
    tier_report,
    tier_summary,
    total_value,
    validate_tier,
)
from income_stream.settings import Settings
from income_stream.utils.dates import utc_now_iso

logger = logging.getLogger(__name__)


class PortfolioService:
    """Service for portfolio business operations.

    Every holding mutation is followed by a portfolio-wide allocation
    recalculation. Both run under one process-wide lock so concurrent
    requests never interleave their writes.
    """

    _lock = asyncio.Lock()

    def __init__(
        self,
        db: Database | None = None,
        quotes: QuoteProvider | None = None,
        settings: Settings | None = None,
    ):
        self._db = db or Database()
        self._quotes = quotes or QuoteProvider()
        self._settings = settings or Settings()

    # -------------------------------------------------------------------------
    # Portfolio record
    # -------------------------------------------------------------------------

    async def get_portfolio(self) -> dict:
        return await self._db.get_portfolio()

    async def update_portfolio(self, data: dict) -> dict:
        changes = dict(data)
        changes["last_updated"] = utc_now_iso()
        return await self._db.update_portfolio(changes)

    # -------------------------------------------------------------------------
    # Holdings
    # -------------------------------------------------------------------------

    async def list_holdings(self) -> list[dict]:
        return await self._db.get_holdings()

    async def get_holding(self, holding_id: int) -> dict:
        holding = await self._db.get_holding(holding_id)
        if holding is None:
            raise HoldingNotFoundError(holding_id)
        return holding

    async def add_holding(self, data: dict) -> dict:
        """Create a holding valued at the stock's current market price."""
        stock = await self._db.get_stock(data["stock_id"])
        if stock is None:
            raise StockNotFoundError(data["stock_id"])

        price = await self._quotes.get_price(stock["symbol"])
        shares = data.get("shares") or 0
        now = utc_now_iso()
        record = {
            "stock_id": stock["id"],
            "shares": shares,
            "average_cost_basis": data.get("average_cost_basis") or 0,
            "current_value": price * shares,
            "allocation_percentage": 0,
            "target_allocation_percentage": data.get("target_allocation_percentage") or 0,
            "currency": stock["currency"],
            "purchase_date": data.get("purchase_date") or date.today().isoformat(),
            "last_updated": now,
        }

        async with self._lock:
            holding = await self._db.insert_holding(record)
            await self._recalculate_allocations()
        logger.info(f"Added holding of {shares} {stock['symbol']}")
        return await self.get_holding(holding["id"])

    async def update_holding(self, holding_id: int, data: dict) -> dict:
        """Apply a partial update, then revalue the holding at the current price."""
        holding = await self.get_holding(holding_id)
        changes = {k: v for k, v in data.items() if v is not None}
        shares = changes.get("shares", holding["shares"])

        stock = holding["stock"]
        if stock is None:
            raise StockNotFoundError(holding["stock_id"])
        price = await self._quotes.get_price(stock["symbol"])
        changes["current_value"] = price * shares
        changes["last_updated"] = utc_now_iso()

        async with self._lock:
            await self._db.update_holding(holding_id, changes)
            await self._recalculate_allocations()
        return await self.get_holding(holding_id)

    async def delete_holding(self, holding_id: int) -> None:
        await self.get_holding(holding_id)
        async with self._lock:
            await self._db.delete_holding(holding_id)
            await self._recalculate_allocations()

    async def _recalculate_allocations(self) -> dict[int, float]:
        """Caller must hold the lock."""
        holdings = await self._db.get_holdings()
        percentages = allocation_percentages(holdings)
        await self._db.set_allocation_percentages(percentages)
        return percentages

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    async def rebalance(self) -> dict:
        """Rebalancing suggestions. Records the run as the portfolio's last rebalance."""
        portfolio = await self._db.get_portfolio()
        holdings = await self._db.get_holdings()
        threshold = float(await self._settings.get("rebalance_threshold_pct"))

        value = total_value(holdings)
        recommendations = rebalance_recommendations(holdings, threshold)
        await self._db.update_portfolio({"last_rebalanced": utc_now_iso()})

        return {
            "total_value": value,
            "cash_reserve": portfolio["cash_reserve"],
            "total_with_cash": value + portfolio["cash_reserve"],
            "recommendations": recommendations,
        }

    async def tier(self, tier: int) -> dict:
        validate_tier(tier)
        holdings = await self._db.get_holdings(tier=tier)
        portfolio = await self._db.get_portfolio()
        return tier_report(tier, holdings, portfolio)

    async def tiers(self) -> list[dict]:
        holdings = await self._db.get_holdings()
        portfolio = await self._db.get_portfolio()
        return tier_summary(holdings, portfolio)

    # -------------------------------------------------------------------------
    # Price refresh
    # -------------------------------------------------------------------------

    async def update_prices(self) -> dict:
        """
        Revalue every holding at the latest quote and store the price on its stock.

        Holdings whose symbol the provider cannot resolve keep their value.
        """
        holdings = [h for h in await self._db.get_holdings() if h["stock"] is not None]
        symbols = sorted({h["stock"]["symbol"] for h in holdings})
        quotes = await self._quotes.get_batch_quotes(symbols)

        now = utc_now_iso()
        values = {}
        priced_stocks = {}
        for holding in holdings:
            stock = holding["stock"]
            quote = quotes.get(stock["symbol"])
            if quote is None:
                continue
            price = quote["regular_market_price"]
            values[holding["id"]] = price * holding["shares"]
            priced_stocks[stock["id"]] = price

        async with self._lock:
            for stock_id, price in priced_stocks.items():
                await self._db.update_stock(stock_id, {"current_price": price, "last_updated": now})
            await self._db.update_holding_values(values)
            await self._recalculate_allocations()

        logger.info(f"Holding price refresh: {len(values)}/{len(holdings)} updated")
        return {"updated": len(values), "skipped": len(holdings) - len(values)}
