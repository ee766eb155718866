"""FastAPI dependencies for API routers.

Provides common dependencies that can be injected into route handlers.
"""

from dataclasses import dataclass

from income_stream.currency import Currency
from income_stream.database import Database
from income_stream.quotes import QuoteProvider
from income_stream.services import DividendService, PortfolioService, StockService
from income_stream.settings import Settings


@dataclass
class CommonDependencies:
    """Common dependencies used across API routes.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(deps: Annotated[CommonDependencies, Depends(get_common_deps)]):
            stocks = await deps.stocks.list_stocks()
    """

    db: Database
    settings: Settings
    quotes: QuoteProvider
    currency: Currency
    stocks: StockService
    portfolio: PortfolioService
    dividends: DividendService


def build_dependencies(
    db: Database,
    settings: Settings,
    quotes: QuoteProvider,
    currency: Currency,
) -> CommonDependencies:
    """Wire the services onto explicit infrastructure objects."""
    return CommonDependencies(
        db=db,
        settings=settings,
        quotes=quotes,
        currency=currency,
        stocks=StockService(db=db, quotes=quotes),
        portfolio=PortfolioService(db=db, quotes=quotes, settings=settings),
        dividends=DividendService(db=db, currency=currency, settings=settings),
    )


async def get_common_deps() -> CommonDependencies:
    """Factory for common dependencies backed by the process-wide singletons."""
    return build_dependencies(
        db=Database(),
        settings=Settings(),
        quotes=QuoteProvider(),
        currency=Currency(),
    )
