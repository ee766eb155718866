"""HTTP-level tests for the /api/quotes market data routes."""

import pytest
from conftest import stock_data


@pytest.mark.asyncio
async def test_quote(client):
    resp = client.get("/api/quotes/quote/clm")
    assert resp.status_code == 200
    assert resp.json()["symbol"] == "CLM"
    assert resp.json()["regular_market_price"] == 8.5


@pytest.mark.asyncio
async def test_unknown_symbol_is_500(client):
    resp = client.get("/api/quotes/quote/NOPE")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch market data"}


@pytest.mark.asyncio
async def test_batch(client):
    resp = client.get("/api/quotes/batch", params={"symbols": "CLM, crf,NOPE"})
    assert resp.status_code == 200
    assert sorted(resp.json()) == ["CLM", "CRF"]


@pytest.mark.asyncio
async def test_batch_requires_symbols(client):
    resp = client.get("/api/quotes/batch")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Symbols parameter is required"}


@pytest.mark.asyncio
async def test_dividend_estimates_use_tracked_frequency(client, temp_db):
    await temp_db.insert_stock(stock_data("CLM", dividend_frequency="Monthly"))

    resp = client.get("/api/quotes/dividends/CLM")

    assert resp.status_code == 200
    assert len(resp.json()) == 12


@pytest.mark.asyncio
async def test_dividend_estimates_untracked_default_quarterly(client):
    assert len(client.get("/api/quotes/dividends/JEPI").json()) == 4


@pytest.mark.asyncio
async def test_refresh(client, quotes):
    client.get("/api/quotes/quote/CLM")
    resp = client.get("/api/quotes/refresh/CLM")

    assert resp.status_code == 200
    assert resp.json()["data"]["symbol"] == "CLM"
    assert quotes._fetch_info.await_count == 2


@pytest.mark.asyncio
async def test_exchange_rate(client):
    resp = client.get("/api/quotes/exchange-rate", params={"from": "USD", "to": "HKD"})
    assert resp.json() == {"from": "USD", "to": "HKD", "rate": 7.8}

    resp = client.get("/api/quotes/exchange-rate", params={"from": "hkd", "to": "usd"})
    assert resp.json()["rate"] == pytest.approx(1 / 7.8)


@pytest.mark.asyncio
async def test_exchange_rate_same_currency(client, quotes):
    resp = client.get("/api/quotes/exchange-rate", params={"from": "HKD", "to": "HKD"})
    assert resp.json()["rate"] == 1.0
    quotes._fetch_info.assert_not_awaited()


@pytest.mark.asyncio
async def test_exchange_rate_validation(client):
    resp = client.get("/api/quotes/exchange-rate", params={"from": "USD"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Both from and to currency parameters are required"}

    resp = client.get("/api/quotes/exchange-rate", params={"from": "USD", "to": "EUR"})
    assert resp.status_code == 400
    assert "Only USD and HKD are supported" in resp.json()["error"]


@pytest.mark.asyncio
async def test_clear_cache_and_stats(client):
    client.get("/api/quotes/quote/CLM")
    client.get("/api/quotes/quote/CLM")

    stats = client.get("/api/quotes/cache-stats").json()
    assert stats["entries"] == 1
    assert stats["hits"] == 1

    resp = client.post("/api/quotes/clear-cache")
    assert resp.json()["cleared"] == 1
    assert client.get("/api/quotes/cache-stats").json()["entries"] == 0
