"""API routers for Income Stream.

Each router handles a specific domain of the API.
"""

from income_stream.api.routers.dividends import router as dividends_router
from income_stream.api.routers.exchange_rates import router as exchange_rates_router
from income_stream.api.routers.jobs import router as jobs_router
from income_stream.api.routers.portfolio import router as portfolio_router
from income_stream.api.routers.quotes import router as quotes_router
from income_stream.api.routers.settings import router as settings_router
from income_stream.api.routers.stocks import router as stocks_router

__all__ = [
    "stocks_router",
    "quotes_router",
    "portfolio_router",
    "dividends_router",
    "exchange_rates_router",
    "settings_router",
    "jobs_router",
]
