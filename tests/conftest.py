"""Pytest configuration and fixtures."""

import asyncio
import os
import tempfile
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from income_stream.api.dependencies import build_dependencies, get_common_deps
from income_stream.api.errors import register_exception_handlers
from income_stream.api.routers import (
    dividends_router,
    exchange_rates_router,
    jobs_router,
    portfolio_router,
    quotes_router,
    settings_router,
    stocks_router,
)
from income_stream.cache import Cache
from income_stream.currency import Currency
from income_stream.database import Database
from income_stream.exceptions import QuoteProviderError
from income_stream.jobs import runner
from income_stream.quotes import QuoteProvider
from income_stream.services import PortfolioService
from income_stream.settings import Settings

# yfinance info payloads served by the `quotes` fixture, keyed by Yahoo symbol
MARKET_INFO = {
    "CLM": {
        "regularMarketPrice": 8.5,
        "longName": "Cornerstone Strategic Value Fund",
        "currency": "USD",
        "dividendRate": 1.52,
        "dividendYield": 17.88,
    },
    "CRF": {
        "regularMarketPrice": 7.6,
        "longName": "Cornerstone Total Return Fund",
        "currency": "USD",
        "dividendRate": 1.49,
        "dividendYield": 19.55,
    },
    "JEPI": {
        "regularMarketPrice": 57.0,
        "longName": "JPMorgan Equity Premium Income ETF",
        "currency": "USD",
        "dividendRate": 4.1,
        "dividendYield": 7.2,
    },
    "MSFT": {
        "regularMarketPrice": 410.0,
        "longName": "Microsoft Corporation",
        "currency": "USD",
    },
    "USDHKD=X": {"regularMarketPrice": 7.8},
}


async def fake_fetch_info(symbol: str) -> dict:
    info = MARKET_INFO.get(symbol)
    if info is None:
        raise QuoteProviderError(symbol, "symbol not found")
    return dict(info)


def stock_data(symbol: str, tier: int = 1, **overrides) -> dict:
    """Minimal stock row for Database.insert_stock."""
    data = {
        "symbol": symbol,
        "name": f"{symbol} Fund",
        "tier": tier,
        "tier_category": {1: "Anchor Funds", 2: "Index-Based Funds", 3: "High-Yield Funds"}[tier],
        "current_price": 10.0,
        "dividend_yield": 12.0,
        "dividend_frequency": "Monthly",
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test starts with fresh process-wide singletons."""

    def _reset():
        Cache._instances.clear()
        Settings._clear()
        QuoteProvider._clear()
        Currency._clear()
        PortfolioService._lock = asyncio.Lock()
        runner._deps.clear()
        runner._history.clear()

    _reset()
    yield
    _reset()


@pytest_asyncio.fixture
async def temp_db():
    """Create a temporary database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    db = Database(db_path)
    await db.connect()

    yield db

    # Cleanup
    await db.close()
    db.remove_from_cache()
    for ext in ["", "-wal", "-shm"]:
        path = db_path + ext
        if os.path.exists(path):
            os.unlink(path)


@pytest_asyncio.fixture
async def settings(temp_db):
    settings = Settings()
    settings._db = temp_db
    await settings.init_defaults()
    return settings


@pytest.fixture
def quotes(monkeypatch):
    """QuoteProvider whose yfinance lookups are served from MARKET_INFO."""
    provider = QuoteProvider()
    monkeypatch.setattr(provider, "_fetch_info", AsyncMock(side_effect=fake_fetch_info))
    return provider


@pytest.fixture
def currency(temp_db, settings, quotes):
    currency = Currency()
    currency._db = temp_db
    currency._settings = settings
    currency._provider = quotes
    return currency


@pytest.fixture
def deps(temp_db, settings, quotes, currency):
    return build_dependencies(db=temp_db, settings=settings, quotes=quotes, currency=currency)


@pytest.fixture
def client(deps):
    """TestClient over every API router, wired to the temporary database."""
    app = FastAPI()
    register_exception_handlers(app)
    for router in (
        stocks_router,
        quotes_router,
        portfolio_router,
        dividends_router,
        exchange_rates_router,
        settings_router,
        jobs_router,
    ):
        app.include_router(router, prefix="/api")

    async def override_deps():
        return deps

    app.dependency_overrides[get_common_deps] = override_deps
    return TestClient(app, raise_server_exceptions=False)
