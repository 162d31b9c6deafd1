"""Unit tests for the cv_summary task handler"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from backend.app.services.background_processor import background_processor
from backend.app.services.cv_analysis_service import CV_SUMMARY_TASK
from backend.app.services.summary_tasks import handle_cv_summary, run_cv_summary
from tests.conftest import FakeTextGenerator, create_test_file, sample_profile


class TestCvSummaryTask:
    """Deferred summary generation driven by a task payload"""

    def test_handler_is_registered(self):
        assert background_processor.task_handlers[CV_SUMMARY_TASK] is handle_cv_summary

    @pytest.mark.asyncio
    async def test_run_writes_summary(self, db_session):
        candidate_file = await create_test_file(db_session)
        generator = FakeTextGenerator(["Strong backend candidate."])

        result = await run_cv_summary(
            {"file_id": str(candidate_file.id), "profile": sample_profile()},
            db_session,
            generator=generator,
        )

        await db_session.refresh(candidate_file)
        assert result == {"file_id": str(candidate_file.id), "summary_length": 25}
        assert candidate_file.cv_summary == "Strong backend candidate."

    @pytest.mark.asyncio
    async def test_run_for_vanished_file(self, db_session):
        generator = FakeTextGenerator(["Summary"])

        result = await run_cv_summary({"file_id": str(uuid4())}, db_session, generator=generator)

        assert result["summary_length"] == len("Summary")

    @pytest.mark.asyncio
    async def test_handler_opens_its_own_session(self, test_session_factory):
        run = AsyncMock(return_value={"summary_length": 3})

        with patch("backend.app.services.summary_tasks.AsyncSessionLocal", test_session_factory), \
                patch("backend.app.services.summary_tasks.run_cv_summary", run):
            result = await handle_cv_summary({"file_id": "abc"})

        assert result == {"summary_length": 3}
        assert run.call_args[0][0] == {"file_id": "abc"}
