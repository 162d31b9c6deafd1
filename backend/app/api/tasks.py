"""Deferred task status API endpoints"""

from typing import Any, Dict

from fastapi import APIRouter
from redis.exceptions import RedisError

from backend.app.services.background_processor import background_processor
from backend.app.core.exceptions import BackgroundJobException, NotFoundException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/status/{job_id}")
async def get_task_status(job_id: str) -> Dict[str, Any]:
    """
    Get the status of a deferred task, e.g. a CV summary

    Status documents expire a week after their last update.
    """
    try:
        task_status = await background_processor.get_task_status(job_id)
    except (RedisError, OSError) as e:
        logger.error(f"Failed to get task status: {e}", extra={"job_id": job_id})
        raise BackgroundJobException("Task queue unavailable", details={"job_id": job_id})

    if not task_status:
        raise NotFoundException(f"Task {job_id} not found")

    return {"success": True, "data": task_status}


@router.get("/stats")
async def get_queue_stats() -> Dict[str, Any]:
    """Queue depth and worker state"""
    try:
        stats = await background_processor.get_queue_stats()
    except (RedisError, OSError) as e:
        logger.error(f"Failed to get queue stats: {e}")
        raise BackgroundJobException("Task queue unavailable")

    return {"success": True, "data": stats}
