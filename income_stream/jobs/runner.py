"""APScheduler-based job runner."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from datetime import datetime
from typing import Any, Callable

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from income_stream.jobs import tasks

logger = logging.getLogger(__name__)

# Module-level state
_scheduler: AsyncIOScheduler | None = None
_deps: dict[str, Any] = {}
_current_job: str | None = None
_history: deque = deque(maxlen=50)

# Job timeout in seconds (15 minutes)
JOB_TIMEOUT = 15 * 60

# Task registry: job_type -> (task_function, dependency keys, interval setting)
TASK_REGISTRY: dict[str, tuple[Callable, list[str], str]] = {
    "sync:prices": (tasks.sync_prices, ["stocks", "portfolio"], "price_refresh_interval_minutes"),
    "sync:exchange_rates": (tasks.sync_exchange_rates, ["currency"], "exchange_rate_refresh_interval_minutes"),
}


def configure(**deps) -> None:
    """Register the objects tasks are called with (stocks, portfolio, currency)."""
    _deps.update(deps)


async def init(settings, **deps) -> AsyncIOScheduler:
    """Create the scheduler, add every registered job and start it.

    Args:
        settings: Settings instance, read for each job's interval
        **deps: Task dependencies keyed as in TASK_REGISTRY

    Returns:
        The running AsyncIOScheduler instance
    """
    global _scheduler, _current_job

    configure(**deps)
    _current_job = None

    _scheduler = AsyncIOScheduler(
        jobstores={"default": MemoryJobStore()},
        executors={"default": AsyncIOExecutor()},
        job_defaults={
            "coalesce": True,  # Collapse missed runs into one
            "max_instances": 1,
            "misfire_grace_time": 60,
        },
    )

    for job_type, (_, _, interval_key) in TASK_REGISTRY.items():
        interval = int(await settings.get(interval_key))
        _scheduler.add_job(
            _job_executor,
            IntervalTrigger(minutes=interval),
            id=job_type,
            name=job_type,
            args=[job_type],
            replace_existing=True,
        )
        logger.debug(f"Added job {job_type} with interval {interval} minutes")

    _scheduler.start()
    logger.info(f"APScheduler started with {len(TASK_REGISTRY)} jobs")
    return _scheduler


async def stop() -> None:
    """Shutdown the scheduler."""
    global _scheduler, _current_job

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("APScheduler stopped")
    _current_job = None


async def _job_executor(job_type: str) -> None:
    await _run_task(job_type)


async def _run_task(job_type: str) -> dict:
    """Run one task with timeout and error capture. Never raises."""
    global _current_job

    task_func, dep_keys, _ = TASK_REGISTRY[job_type]
    args = []
    for key in dep_keys:
        dep = _deps.get(key)
        if dep is None:
            logger.error(f"Missing dependency {key} for job {job_type}")
            return {"status": "skipped", "reason": f"missing_dependency:{key}", "duration_ms": 0}
        args.append(dep)

    _current_job = job_type
    start = datetime.now()
    try:
        await asyncio.wait_for(task_func(*args), timeout=JOB_TIMEOUT)
        result = {"status": "completed"}
        logger.info(f"Job {job_type} completed")
    except asyncio.TimeoutError:
        result = {"status": "failed", "error": f"Job {job_type} timed out after {JOB_TIMEOUT}s"}
        logger.error(result["error"])
    except Exception as e:
        result = {"status": "failed", "error": str(e)}
        logger.error(f"Job {job_type} failed: {e}")
    finally:
        _current_job = None

    result["duration_ms"] = int((datetime.now() - start).total_seconds() * 1000)
    _history.appendleft({"job_type": job_type, "status": result["status"], "executed_at": start.isoformat()})
    return result


async def run_now(job_type: str) -> dict:
    """Execute a task immediately.

    Returns:
        Dict with status, duration_ms, and optional error
    """
    if job_type not in TASK_REGISTRY:
        return {"status": "failed", "error": f"Unknown job type: {job_type}", "duration_ms": 0}
    return await _run_task(job_type)


async def get_status() -> dict:
    """Scheduler state: running job, every job's next run and recent runs."""
    jobs = []
    if _scheduler:
        for job in _scheduler.get_jobs():
            jobs.append(
                {
                    "job_type": job.id,
                    "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
                }
            )
        jobs.sort(key=lambda j: j["next_run"] or "")

    return {
        "running": _scheduler is not None,
        "current": _current_job,
        "jobs": jobs,
        "job_types": list(TASK_REGISTRY),
        "recent": list(_history)[:10],
    }
