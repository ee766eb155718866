"""Job task functions - plain async functions for APScheduler."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


async def sync_prices(stocks, portfolio) -> None:
    """Refresh stock prices, then holding values and allocations."""
    stock_result = await stocks.update_prices()
    holding_result = await portfolio.update_prices()
    logger.info(
        f"Price sync complete: {stock_result['updated']} stocks, {holding_result['updated']} holdings updated"
    )


async def sync_exchange_rates(currency) -> None:
    """Store today's USD/HKD rates."""
    rates = await currency.refresh_rates()
    logger.info(f"Exchange rate sync complete: USD/HKD = {rates['usd_to_hkd']['rate']}")
