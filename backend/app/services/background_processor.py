"""Background processor service for managing async tasks"""

import asyncio
import time
import traceback
from typing import Any, Callable, Dict, List, Optional

from backend.app.core.task_queue import TaskQueue, TaskStatus, task_queue
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class BackgroundProcessor:
    """Runs registered handlers for tasks pulled off the Redis queue"""

    def __init__(self, queue: Optional[TaskQueue] = None):
        self.task_queue = queue or task_queue
        self.task_handlers: Dict[str, Callable] = {}
        self.is_running = False
        self.worker_tasks: List[asyncio.Task] = []
        self.dequeue_timeout = 5

    def register_task_handler(self, task_type: str, handler: Callable) -> None:
        """
        Register a handler function for a specific task type

        Args:
            task_type: Type of task (e.g., 'cv_summary')
            handler: Async function taking the task data dict
        """
        self.task_handlers[task_type] = handler
        logger.info(f"Registered handler for task type: {task_type}")

    async def enqueue_task(
        self,
        task_type: str,
        task_data: Dict[str, Any],
        priority: int = 0
    ) -> str:
        job_id = await self.task_queue.enqueue_task(
            task_type=task_type,
            task_data=task_data,
            priority=priority
        )
        logger.info(f"Enqueued task {task_type} with job_id {job_id}")
        return job_id

    async def get_task_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        status = await self.task_queue.get_task_status(job_id)
        if status is None:
            return None
        return {"job_id": job_id, **status}

    async def start_workers(self, num_workers: int = 2) -> None:
        """
        Start background worker loops

        Args:
            num_workers: Number of concurrent loops to start
        """
        if self.is_running:
            logger.warning("Workers are already running")
            return

        self.is_running = True
        logger.info(f"Starting {num_workers} background workers")

        for i in range(num_workers):
            worker_task = asyncio.create_task(
                self._worker_loop(worker_id=i),
                name=f"background_worker_{i}"
            )
            self.worker_tasks.append(worker_task)

    async def stop_workers(self) -> None:
        """Stop all background workers"""
        if not self.is_running:
            logger.warning("Workers are not running")
            return

        logger.info("Stopping background workers")
        self.is_running = False

        for task in self.worker_tasks:
            task.cancel()

        if self.worker_tasks:
            await asyncio.gather(*self.worker_tasks, return_exceptions=True)

        self.worker_tasks.clear()
        logger.info("Stopped all background workers")

    async def _worker_loop(self, worker_id: int) -> None:
        logger.info(f"Worker {worker_id} started")

        while self.is_running:
            try:
                task_payload = await self.task_queue.dequeue_task(timeout=self.dequeue_timeout)
                if not task_payload:
                    continue

                await self._process_task(task_payload, worker_id)

            except asyncio.CancelledError:
                logger.info(f"Worker {worker_id} cancelled")
                break
            except Exception as e:
                # Redis hiccups must not kill the loop
                logger.error(f"Worker {worker_id} error: {e}")
                await asyncio.sleep(1)

        logger.info(f"Worker {worker_id} stopped")

    async def _process_task(self, task_payload: Dict[str, Any], worker_id: int) -> None:
        """
        Run one task and record its outcome in the queue's status store

        Handler failures mark the task FAILED; they are not retried.
        """
        job_id = task_payload["job_id"]
        task_type = task_payload["task_type"]
        task_data = task_payload.get("task_data") or {}
        log_extra = {"task_type": task_type, "job_id": job_id}

        logger.info(f"Worker {worker_id} processing task {task_type}", extra=log_extra)

        try:
            handler = self.task_handlers.get(task_type)
            if not handler:
                raise ValueError(f"No handler registered for task type: {task_type}")

            started = time.perf_counter()
            result = await handler(task_data)
            elapsed = time.perf_counter() - started

            await self.task_queue.set_task_status(
                job_id=job_id,
                status=TaskStatus.COMPLETED,
                result_data={"result": result, "processing_time_seconds": elapsed}
            )
            logger.info(f"Worker {worker_id} completed task {task_type}", extra=log_extra)

        except Exception as e:
            error_message = f"Task failed: {str(e)}"
            logger.error(
                f"Worker {worker_id} failed task {task_type}: {error_message}",
                extra=log_extra
            )
            logger.debug(f"Task failure traceback: {traceback.format_exc()}")

            await self.task_queue.set_task_status(
                job_id=job_id,
                status=TaskStatus.FAILED,
                error_message=error_message
            )

    async def get_queue_stats(self) -> Dict[str, Any]:
        redis_stats = await self.task_queue.get_queue_stats()
        return {
            "redis_queue": redis_stats,
            "workers_running": len(self.worker_tasks),
            "is_processing": self.is_running,
            "registered_handlers": sorted(self.task_handlers),
        }


# Global background processor instance
background_processor = BackgroundProcessor()


def task_handler(task_type: str):
    """
    Decorator to register a function as a task handler

    Args:
        task_type: Type of task this handler processes
    """
    def decorator(func: Callable):
        background_processor.register_task_handler(task_type, func)
        return func
    return decorator
