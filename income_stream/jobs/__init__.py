"""
Jobs - Periodic background refreshes on APScheduler.

Usage:
    from income_stream.jobs import init, stop, run_now, get_status

    await init(settings, stocks=StockService(), portfolio=PortfolioService(), currency=Currency())
    await run_now('sync:exchange_rates')
    await stop()
"""

from income_stream.jobs.runner import TASK_REGISTRY, configure, get_status, init, run_now, stop

__all__ = ["TASK_REGISTRY", "configure", "init", "stop", "run_now", "get_status"]
