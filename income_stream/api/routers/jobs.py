"""Background job API routes."""

from fastapi import APIRouter, HTTPException

from income_stream.jobs import get_status, run_now

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("")
async def get_jobs() -> dict:
    """Scheduled jobs, their next run times and recent runs."""
    return await get_status()


@router.post("/{job_type:path}/run")
async def run_job(job_type: str) -> dict:
    """Manually trigger a job by type. Executes immediately."""
    result = await run_now(job_type)
    if result.get("status") == "failed" and "Unknown job type" in result.get("error", ""):
        raise HTTPException(status_code=404, detail=result["error"])
    return result
