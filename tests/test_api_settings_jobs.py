"""HTTP-level tests for /api/settings, /api/jobs, error mapping and health."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from income_stream.jobs import configure


@pytest.mark.asyncio
async def test_get_settings(client):
    body = client.get("/api/settings").json()
    assert body["default_currency"] == "USD"
    assert body["forecast_months"] == 12


@pytest.mark.asyncio
async def test_put_setting(client):
    resp = client.put("/api/settings/forecast_months", json={"value": "6"})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "key": "forecast_months", "value": 6}
    assert client.get("/api/settings").json()["forecast_months"] == 6


@pytest.mark.asyncio
async def test_put_setting_validation(client):
    resp = client.put("/api/settings/not_a_key", json={"value": 1})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Unknown setting: not_a_key"}

    assert client.put("/api/settings/default_currency", json={"value": "EUR"}).status_code == 400
    assert client.put("/api/settings/upcoming_days", json={"value": 1.9}).status_code == 400
    assert client.get("/api/settings").json()["upcoming_days"] == 30


@pytest.mark.asyncio
async def test_quote_ttl_setting_applies_to_provider(client, quotes):
    client.put("/api/settings/quote_cache_ttl_days", json={"value": 1})
    assert quotes.cache_stats()["ttl_seconds"] == 86400


@pytest.mark.asyncio
async def test_unhandled_error_is_hidden(client, deps):
    deps.stocks.list_stocks = AsyncMock(side_effect=RuntimeError("disk on fire"))

    resp = client.get("/api/stocks")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_unknown_route_uses_error_body(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_jobs_status(client):
    body = client.get("/api/jobs").json()
    assert body["running"] is False
    assert body["job_types"] == ["sync:prices", "sync:exchange_rates"]


@pytest.mark.asyncio
async def test_run_unknown_job(client):
    resp = client.post("/api/jobs/sync:everything/run")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Unknown job type: sync:everything"}


@pytest.mark.asyncio
async def test_run_exchange_rate_job(client, deps, temp_db):
    configure(currency=deps.currency)

    resp = client.post("/api/jobs/sync:exchange_rates/run")

    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert (await temp_db.get_latest_rate("HKD", "USD"))["rate"] == pytest.approx(1 / 7.8)
    assert client.get("/api/jobs").json()["recent"][0]["job_type"] == "sync:exchange_rates"


def test_health():
    from income_stream.app import app
    from income_stream.version import VERSION

    resp = TestClient(app).get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": VERSION}
