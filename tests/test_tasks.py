"""Tests for background job tasks and the job runner."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from income_stream.jobs import runner, tasks


def _stocks(updated=3):
    stocks = MagicMock()
    stocks.update_prices = AsyncMock(return_value={"updated": updated, "skipped": 0})
    return stocks


def _portfolio(updated=2):
    portfolio = MagicMock()
    portfolio.update_prices = AsyncMock(return_value={"updated": updated, "skipped": 0})
    return portfolio


def _currency(rate=7.8):
    currency = MagicMock()
    currency.refresh_rates = AsyncMock(return_value={"usd_to_hkd": {"rate": rate}, "hkd_to_usd": {"rate": 1 / rate}})
    return currency


class TestTasks:
    @pytest.mark.asyncio
    async def test_sync_prices_refreshes_stocks_then_holdings(self):
        calls = []
        stocks = _stocks()
        portfolio = _portfolio()
        stocks.update_prices.side_effect = lambda: calls.append("stocks") or {"updated": 1, "skipped": 0}
        portfolio.update_prices.side_effect = lambda: calls.append("holdings") or {"updated": 1, "skipped": 0}

        await tasks.sync_prices(stocks, portfolio)

        assert calls == ["stocks", "holdings"]

    @pytest.mark.asyncio
    async def test_sync_exchange_rates(self):
        currency = _currency()
        await tasks.sync_exchange_rates(currency)
        currency.refresh_rates.assert_awaited_once()


class TestRunner:
    """Tests for manual runs and status."""

    @pytest.mark.asyncio
    async def test_unknown_job(self):
        result = await runner.run_now("sync:nothing")
        assert result["status"] == "failed"
        assert "Unknown job type" in result["error"]

    @pytest.mark.asyncio
    async def test_missing_dependency_skips(self):
        result = await runner.run_now("sync:prices")
        assert result["status"] == "skipped"
        assert result["reason"] == "missing_dependency:stocks"

    @pytest.mark.asyncio
    async def test_run_now_completes(self):
        stocks, portfolio = _stocks(), _portfolio()
        runner.configure(stocks=stocks, portfolio=portfolio)

        result = await runner.run_now("sync:prices")

        assert result["status"] == "completed"
        assert result["duration_ms"] >= 0
        stocks.update_prices.assert_awaited_once()
        portfolio.update_prices.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_task_failure_is_captured(self):
        currency = MagicMock()
        currency.refresh_rates = AsyncMock(side_effect=RuntimeError("provider down"))
        runner.configure(currency=currency)

        result = await runner.run_now("sync:exchange_rates")

        assert result == {"status": "failed", "error": "provider down", "duration_ms": result["duration_ms"]}
        status = await runner.get_status()
        assert status["recent"][0] == {
            "job_type": "sync:exchange_rates",
            "status": "failed",
            "executed_at": status["recent"][0]["executed_at"],
        }

    @pytest.mark.asyncio
    async def test_scheduler_lifecycle(self, settings):
        await settings.set("exchange_rate_refresh_interval_minutes", 60)
        await runner.init(settings, stocks=_stocks(), portfolio=_portfolio(), currency=_currency())
        try:
            status = await runner.get_status()
            assert status["running"] is True
            assert {job["job_type"] for job in status["jobs"]} == {"sync:prices", "sync:exchange_rates"}
            assert all(job["next_run"] for job in status["jobs"])
            assert status["jobs"][0]["job_type"] == "sync:exchange_rates"
        finally:
            await runner.stop()

        assert (await runner.get_status())["running"] is False
