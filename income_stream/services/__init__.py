"""Service layer for business logic.

Services orchestrate the database, the quote provider and the pure
calculation modules (income, rebalance) for the API routers and jobs.
"""

from income_stream.services.dividends import DividendService
from income_stream.services.portfolio import PortfolioService
from income_stream.services.stocks import StockService

__all__ = ["DividendService", "PortfolioService", "StockService"]
