# =============================================================================
# app/routers/jobs.py - Background Job Status
# =============================================================================
# Poll the Celery jobs queued by the week sync and week generation endpoints.
#
# Job states:
# - PENDING: waiting in queue (or unknown id)
# - STARTED: picked up by a worker
# - PROGRESS: running, with percent/message
# - SUCCESS: finished, result attached
# - FAILURE: raised, error attached
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path
from pydantic import BaseModel

from app.dependencies import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter()


class JobStatusResponse(BaseModel):
    """Status of a background job."""
    job_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: Any | None = None
    error: str | None = None


@router.get("/{job_id}", response_model=JobStatusResponse)
async def get_job_status(
    job_id: Annotated[str, Path(description="Celery task ID")],
    user: CurrentUser,
):
    """Get the status of a week sync or week generation job."""
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(job_id)
        status = result.status
    except Exception as e:
        logger.error(f"Error getting status of job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get job status: {e}")

    response = JobStatusResponse(job_id=job_id, status=status)

    if status == "PROGRESS":
        info = result.info or {}
        response.progress = info.get("percent", 0)
        response.message = info.get("message", "Processing...")

    elif status == "SUCCESS":
        response.result = result.result
        response.progress = 100
        response.message = "Complete"

    elif status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
        response.message = "Failed"

    elif status == "PENDING":
        response.progress = 0
        response.message = "Waiting in queue..."

    elif status == "STARTED":
        response.progress = 0
        response.message = "Starting..."

    return response
