"""Unit tests for task queue functionality"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from backend.app.core.exceptions import BackgroundJobException
from backend.app.core.task_queue import STATUS_TTL, TaskQueue, TaskStatus


class TestTaskQueue:
    """Test cases for TaskQueue class"""

    @pytest.fixture
    def task_queue(self):
        """Task queue with a mocked Redis connection"""
        queue = TaskQueue("redis://localhost:6379/1", namespace="test")
        queue._redis = AsyncMock()
        return queue

    @pytest.mark.asyncio
    async def test_connect_success(self):
        """Test successful Redis connection"""
        queue = TaskQueue("redis://localhost:6379/1")

        with patch("redis.asyncio.from_url") as mock_from_url:
            mock_redis = AsyncMock()
            mock_from_url.return_value = mock_redis

            await queue.connect()

            assert queue._redis is mock_redis
            mock_redis.ping.assert_called_once()

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        """Test Redis connection failure"""
        queue = TaskQueue("redis://invalid:6379/1")

        with patch("redis.asyncio.from_url") as mock_from_url:
            mock_redis = AsyncMock()
            mock_redis.ping.side_effect = RedisConnectionError("Connection failed")
            mock_from_url.return_value = mock_redis

            with pytest.raises(RedisConnectionError, match="Connection failed"):
                await queue.connect()

    @pytest.mark.asyncio
    async def test_enqueue_task(self, task_queue):
        """Enqueue stores a queued status and a scored payload"""
        task_data = {"file_id": "123", "profile": {"cv": {"score": 80}}}

        job_id = await task_queue.enqueue_task("cv_summary", task_data, priority=5)

        assert isinstance(job_id, str) and job_id

        queue_name, mapping = task_queue._redis.zadd.call_args[0]
        assert queue_name == "test:tasks"
        payload_json, score = next(iter(mapping.items()))
        payload = json.loads(payload_json)
        assert score == 5
        assert payload["job_id"] == job_id
        assert payload["task_type"] == "cv_summary"
        assert payload["task_data"] == task_data

        key, ttl, status_json = task_queue._redis.setex.call_args[0]
        assert key == f"test:status:{job_id}"
        assert ttl == STATUS_TTL
        assert json.loads(status_json)["status"] == "queued"

    @pytest.mark.asyncio
    async def test_enqueue_failure_raises_background_job_error(self, task_queue):
        """A Redis error while enqueueing reaches the caller as a job error"""
        task_queue._redis.zadd.side_effect = RedisConnectionError("down")

        with pytest.raises(BackgroundJobException) as exc_info:
            await task_queue.enqueue_task("cv_summary", {})

        assert exc_info.value.details == {"task_type": "cv_summary"}
        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_enqueue_without_redis_raises_background_job_error(self):
        """An unreachable Redis on first use is reported the same way"""
        queue = TaskQueue("redis://localhost:6379/1", namespace="test")

        with patch("redis.asyncio.from_url") as mock_from_url:
            mock_redis = AsyncMock()
            mock_redis.ping.side_effect = RedisConnectionError("Connection refused")
            mock_from_url.return_value = mock_redis

            with pytest.raises(BackgroundJobException, match="Connection refused"):
                await queue.enqueue_task("cv_summary", {})

    @pytest.mark.asyncio
    async def test_dequeue_task_success(self, task_queue):
        """Test successful task dequeue"""
        payload = {
            "job_id": "test-job-123",
            "task_type": "cv_summary",
            "task_data": {"file_id": "123"},
            "priority": 0,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        task_queue._redis.bzpopmax = AsyncMock(
            return_value=(task_queue.queue_name, json.dumps(payload), 0)
        )

        result = await task_queue.dequeue_task(timeout=1)

        assert result == payload
        key, _, status_json = task_queue._redis.setex.call_args[0]
        assert key == "test:status:test-job-123"
        assert json.loads(status_json)["status"] == "processing"

    @pytest.mark.asyncio
    async def test_dequeue_task_timeout(self, task_queue):
        """Dequeue returns None when nothing arrives before the timeout"""
        task_queue._redis.bzpopmax = AsyncMock(return_value=None)

        assert await task_queue.dequeue_task(timeout=1) is None
        task_queue._redis.setex.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_task_status_with_result(self, task_queue):
        """Result data and error messages are stored alongside the status"""
        await task_queue.set_task_status(
            "job-1",
            TaskStatus.FAILED,
            result_data={"attempt": 1},
            error_message="boom"
        )

        status = json.loads(task_queue._redis.setex.call_args[0][2])
        assert status["status"] == "failed"
        assert status["result_data"] == {"attempt": 1}
        assert status["error_message"] == "boom"
        assert "updated_at" in status

    @pytest.mark.asyncio
    async def test_get_task_status(self, task_queue):
        """Test status lookup"""
        task_queue._redis.get = AsyncMock(return_value=json.dumps({"status": "completed"}))

        assert await task_queue.get_task_status("job-1") == {"status": "completed"}
        task_queue._redis.get.assert_called_once_with("test:status:job-1")

    @pytest.mark.asyncio
    async def test_get_task_status_unknown(self, task_queue):
        task_queue._redis.get = AsyncMock(return_value=None)

        assert await task_queue.get_task_status("missing") is None

    @pytest.mark.asyncio
    async def test_get_queue_stats(self, task_queue):
        """Test queue statistics"""
        task_queue._redis.zcard = AsyncMock(return_value=3)

        assert await task_queue.get_queue_stats() == {"queued_tasks": 3}

    @pytest.mark.asyncio
    async def test_clear_queue(self, task_queue):
        await task_queue.clear_queue()

        task_queue._redis.delete.assert_called_once_with("test:tasks")

    @pytest.mark.asyncio
    async def test_disconnect(self, task_queue):
        mock_redis = task_queue._redis

        await task_queue.disconnect()

        mock_redis.close.assert_called_once()
        assert task_queue._redis is None
