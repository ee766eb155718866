"""HTTP-level tests for /api/dividends."""

from datetime import date, timedelta

import pytest
from conftest import stock_data


def _payment(stock_id, payment_date, **overrides):
    body = {
        "stock_id": stock_id,
        "ex_date": payment_date,
        "payment_date": payment_date,
        "amount_per_share": 0.1246,
        "shares": 1000,
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_dividend(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CLM"))

    resp = client.post("/api/dividends", json=_payment(stock["id"], "2024-03-28", total_amount=5))

    assert resp.status_code == 201
    body = resp.json()
    assert body["total_amount"] == pytest.approx(124.60)
    assert body["currency"] == "USD"
    assert body["reinvested"] is False
    assert body["stock"]["symbol"] == "CLM"


@pytest.mark.asyncio
async def test_create_for_missing_stock(client):
    resp = client.post("/api/dividends", json=_payment(42, "2024-03-28"))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Stock not found"}


@pytest.mark.asyncio
async def test_create_rejects_bad_currency(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CLM"))
    resp = client.post("/api/dividends", json=_payment(stock["id"], "2024-03-28", currency="EUR"))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_get_update_delete(client, temp_db):
    clm = await temp_db.insert_stock(stock_data("CLM"))
    crf = await temp_db.insert_stock(stock_data("CRF"))
    older = client.post("/api/dividends", json=_payment(clm["id"], "2024-01-30")).json()
    newer = client.post("/api/dividends", json=_payment(crf["id"], "2024-02-28")).json()

    assert [d["id"] for d in client.get("/api/dividends").json()] == [newer["id"], older["id"]]
    assert [d["id"] for d in client.get(f"/api/dividends/stock/{crf['id']}").json()] == [newer["id"]]
    assert client.get(f"/api/dividends/{older['id']}").json()["payment_date"] == "2024-01-30"

    resp = client.put(f"/api/dividends/{older['id']}", json={"amount_per_share": 0.2, "notes": "DRIP"})
    assert resp.json()["total_amount"] == pytest.approx(200)
    assert resp.json()["notes"] == "DRIP"

    assert client.delete(f"/api/dividends/{older['id']}").status_code == 200
    resp = client.get(f"/api/dividends/{older['id']}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Dividend not found"}


@pytest.mark.asyncio
async def test_monthly_income(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CLM"))
    client.post("/api/dividends", json=_payment(stock["id"], "2024-03-28", amount_per_share=0.1, shares=100))
    client.post("/api/dividends", json=_payment(stock["id"], "2024-04-28", amount_per_share=1, shares=78, currency="HKD"))

    body = client.get("/api/dividends/income/monthly", params={"year": 2024, "currency": "HKD"}).json()

    assert body["currency"] == "HKD"
    assert body["monthly_income"][2]["display_total"] == pytest.approx(78)
    assert body["monthly_income"][3]["total_usd"] == pytest.approx(10)
    assert body["yearly_total"] == pytest.approx(156)


@pytest.mark.asyncio
async def test_monthly_income_bad_currency(client):
    resp = client.get("/api/dividends/income/monthly", params={"year": 2024, "currency": "EUR"})
    assert resp.status_code == 400
    assert "Only USD and HKD are supported" in resp.json()["error"]


@pytest.mark.asyncio
async def test_yearly_income(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CLM"))
    client.post("/api/dividends", json=_payment(stock["id"], "2023-06-30", amount_per_share=1, shares=10))

    body = client.get("/api/dividends/income/yearly", params={"start_year": 2022, "end_year": 2024}).json()

    assert [row["year"] for row in body["yearly_income"]] == [2022, 2023, 2024]
    assert body["grand_total"] == pytest.approx(10)

    resp = client.get("/api/dividends/income/yearly", params={"start_year": 2025, "end_year": 2024})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_upcoming(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("CLM"))
    soon = (date.today() + timedelta(days=3)).isoformat()
    later = (date.today() + timedelta(days=45)).isoformat()
    client.post("/api/dividends", json=_payment(stock["id"], later))
    client.post("/api/dividends", json=_payment(stock["id"], soon))

    assert [d["payment_date"] for d in client.get("/api/dividends/upcoming").json()] == [soon]
    assert [d["payment_date"] for d in client.get("/api/dividends/upcoming", params={"days": 60}).json()] == [
        soon,
        later,
    ]


@pytest.mark.asyncio
async def test_forecast(client, temp_db):
    stock = await temp_db.insert_stock(stock_data("JEPI", tier=2, current_price=57.0, dividend_yield=8.0, dividend_frequency="Quarterly"))
    await temp_db.insert_holding({"stock_id": stock["id"], "shares": 100})

    body = client.get("/api/dividends/forecast", params={"months": 12}).json()

    paying = [row["month"] for row in body["forecast"] if row["dividends"]]
    assert sorted(paying) == [3, 6, 9, 12]
    assert body["total_forecast"] == pytest.approx(100 * 57.0 * 0.08)

    assert client.get("/api/dividends/forecast", params={"months": 0}).status_code == 400
