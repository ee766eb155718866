"""HTTP-level tests for /api/stocks."""

import pytest
from conftest import stock_data

from income_stream.config.catalog import INITIAL_CATALOG


@pytest.mark.asyncio
async def test_create_stock(client):
    resp = client.post("/api/stocks", json={"symbol": "clm", "name": "Cornerstone Strategic Value Fund", "tier": 1})

    assert resp.status_code == 201
    body = resp.json()
    assert body["symbol"] == "CLM"
    assert body["current_price"] == 8.5
    assert body["dividend_frequency"] == "Quarterly"


@pytest.mark.asyncio
async def test_create_duplicate_stock(client, temp_db):
    await temp_db.insert_stock(stock_data("CLM"))

    resp = client.post("/api/stocks", json={"symbol": "CLM", "name": "Cornerstone", "tier": 1})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Stock already exists"}


@pytest.mark.asyncio
async def test_create_stock_bad_body(client):
    resp = client.post("/api/stocks", json={"symbol": "CLM", "name": "Cornerstone", "tier": 5})

    assert resp.status_code == 400
    assert "tier" in resp.json()["error"]
    assert resp.json()["details"]


@pytest.mark.asyncio
async def test_create_stock_quote_failure(client):
    resp = client.post("/api/stocks", json={"symbol": "NOPE", "name": "Nothing", "tier": 3})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch market data"}


@pytest.mark.asyncio
async def test_get_and_list(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CRF"))
    await temp_db.insert_stock(stock_data("CLM"))

    assert client.get(f"/api/stocks/{stock['id']}").json()["symbol"] == "CRF"
    assert [s["symbol"] for s in client.get("/api/stocks").json()] == ["CLM", "CRF"]


@pytest.mark.asyncio
async def test_missing_stock(client):
    resp = client.get("/api/stocks/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Stock not found"}


@pytest.mark.asyncio
async def test_stocks_by_tier(client, temp_db):
    await temp_db.insert_stocks([stock_data("CLM"), stock_data("QQQY", tier=3)])

    assert [s["symbol"] for s in client.get("/api/stocks/tier/3").json()] == ["QQQY"]

    resp = client.get("/api/stocks/tier/4")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid tier. Must be 1, 2, or 3."}


@pytest.mark.asyncio
async def test_update_stock(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CLM"))

    resp = client.put(f"/api/stocks/{stock['id']}", json={"dividend_yield": 18.5, "risk_level": "High"})

    assert resp.status_code == 200
    assert resp.json()["dividend_yield"] == 18.5
    assert resp.json()["risk_level"] == "High"
    assert resp.json()["name"] == "CLM Fund"


@pytest.mark.asyncio
async def test_delete_stock(client, temp_db):
    referenced = await temp_db.insert_stock(stock_data("CLM"))
    free = await temp_db.insert_stock(stock_data("CRF"))
    await temp_db.insert_holding({"stock_id": referenced["id"], "shares": 1})

    resp = client.delete(f"/api/stocks/{referenced['id']}")
    assert resp.status_code == 400
    assert resp.json()["holdings"] == 1

    resp = client.delete(f"/api/stocks/{free['id']}")
    assert resp.status_code == 200
    assert client.delete(f"/api/stocks/{free['id']}").status_code == 404


@pytest.mark.asyncio
async def test_initialize(client):
    resp = client.get("/api/stocks/initialize")
    assert resp.status_code == 201
    assert resp.json()["count"] == len(INITIAL_CATALOG)

    resp = client.get("/api/stocks/initialize")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Stocks already initialized", "count": len(INITIAL_CATALOG)}


@pytest.mark.asyncio
async def test_update_prices(client, temp_db):
    await temp_db.insert_stocks([stock_data("CLM"), stock_data("NOPE")])

    resp = client.get("/api/stocks/update-prices")

    assert resp.status_code == 200
    assert resp.json()["updated"] == 1
    assert resp.json()["skipped"] == 1
