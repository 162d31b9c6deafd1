"""Redis-backed queue for deferred work such as CV summaries"""

import json
import uuid
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone
import enum
import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError
from backend.app.core.config import settings
from backend.app.core.exceptions import BackgroundJobException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

STATUS_TTL = timedelta(days=7)


class TaskStatus(str, enum.Enum):
    """Lifecycle of a queued task"""
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class TaskQueue:
    """Priority queue of JSON task payloads with per-task status keys"""

    def __init__(self, redis_url: Optional[str] = None, namespace: str = "smarter"):
        self.redis_url = redis_url or settings.REDIS_URL
        self._redis: Optional[Redis] = None
        self.queue_name = f"{namespace}:tasks"
        self.status_prefix = f"{namespace}:status"

    async def connect(self) -> None:
        """Open the Redis connection and verify it with a ping"""
        try:
            self._redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True
            )
            await self._redis.ping()
            logger.info("Connected to Redis task queue")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.close()
            self._redis = None
            logger.info("Disconnected from Redis task queue")

    async def enqueue_task(
        self,
        task_type: str,
        task_data: Dict[str, Any],
        priority: int = 0
    ) -> str:
        """
        Add a task to the queue

        Args:
            task_type: Handler name, e.g. 'cv_summary'
            task_data: JSON-serializable handler input
            priority: Higher values are dequeued first

        Returns:
            job_id: Identifier usable with get_task_status

        Raises:
            BackgroundJobException: Redis could not be reached or rejected the write
        """
        job_id = str(uuid.uuid4())
        task_payload = {
            "job_id": job_id,
            "task_type": task_type,
            "task_data": task_data,
            "priority": priority,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        try:
            if not self._redis:
                await self.connect()
            await self.set_task_status(job_id, TaskStatus.QUEUED)
            await self._redis.zadd(self.queue_name, {json.dumps(task_payload): priority})
            logger.info(
                f"Enqueued task {task_type}",
                extra={"task_type": task_type, "job_id": job_id}
            )
            return job_id
        except (RedisError, OSError) as e:
            logger.error(f"Failed to enqueue task {task_type}: {e}")
            raise BackgroundJobException(
                f"Failed to enqueue task {task_type}: {e}",
                details={"task_type": task_type}
            ) from e

    async def dequeue_task(self, timeout: int = 10) -> Optional[Dict[str, Any]]:
        """Pop the highest-priority task, blocking up to ``timeout`` seconds"""
        if not self._redis:
            await self.connect()

        try:
            result = await self._redis.bzpopmax(self.queue_name, timeout=timeout)
            if not result:
                return None

            _, task_json, _ = result
            task_payload = json.loads(task_json)
            job_id = task_payload["job_id"]
            await self.set_task_status(job_id, TaskStatus.PROCESSING)

            logger.info(
                f"Dequeued task {task_payload['task_type']}",
                extra={"task_type": task_payload["task_type"], "job_id": job_id}
            )
            return task_payload
        except Exception as e:
            logger.error(f"Failed to dequeue task: {e}")
            raise

    async def set_task_status(
        self,
        job_id: str,
        status: TaskStatus,
        result_data: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None
    ) -> None:
        """Store the task status document, expiring after a week"""
        if not self._redis:
            await self.connect()

        status_data: Dict[str, Any] = {
            "status": status.value,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }
        if result_data:
            status_data["result_data"] = result_data
        if error_message:
            status_data["error_message"] = error_message

        try:
            await self._redis.setex(
                f"{self.status_prefix}:{job_id}",
                STATUS_TTL,
                json.dumps(status_data)
            )
        except Exception as e:
            logger.error(f"Failed to set task status for {job_id}: {e}")
            raise

    async def get_task_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        if not self._redis:
            await self.connect()

        status_json = await self._redis.get(f"{self.status_prefix}:{job_id}")
        if status_json:
            return json.loads(status_json)
        return None

    async def get_queue_stats(self) -> Dict[str, int]:
        if not self._redis:
            await self.connect()

        return {"queued_tasks": await self._redis.zcard(self.queue_name)}

    async def clear_queue(self) -> None:
        """Drop every pending task"""
        if not self._redis:
            await self.connect()

        await self._redis.delete(self.queue_name)
        logger.info("Cleared task queue")


# Global task queue instance
task_queue = TaskQueue()
