"""Task handlers run by the background worker"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import AsyncSessionLocal
from backend.app.core.task_queue import TaskQueue, task_queue
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.repositories.prompt_repository import PromptRepository
from backend.app.services.background_processor import task_handler
from backend.app.services.cv_analysis_service import CV_SUMMARY_TASK, CVAnalysisService
from backend.app.services.llm_service import TextGenerationService
from backend.app.services.s3_service import S3Service
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


def build_cv_analysis_service(
    session: AsyncSession,
    storage: Optional[S3Service] = None,
    generator: Optional[TextGenerationService] = None,
    queue: Optional[TaskQueue] = None
) -> CVAnalysisService:
    """Wire a pipeline instance onto one database session"""
    return CVAnalysisService(
        file_repository=FileRepository(session),
        candidate_repository=CandidateRepository(session),
        prompt_repository=PromptRepository(session),
        storage=storage or S3Service(),
        generator=generator or TextGenerationService(),
        task_queue=queue or task_queue,
    )


async def run_cv_summary(
    task_data: Dict[str, Any],
    session: AsyncSession,
    generator: Optional[TextGenerationService] = None
) -> Dict[str, Any]:
    """Write the narrative summary described by a ``cv_summary`` task payload"""
    file_id = UUID(task_data["file_id"])
    profile = task_data.get("profile") or {}

    service = build_cv_analysis_service(session, generator=generator)
    summary = await service.generate_cv_summary(file_id, profile)
    return {"file_id": str(file_id), "summary_length": len(summary)}


@task_handler(CV_SUMMARY_TASK)
async def handle_cv_summary(task_data: Dict[str, Any]) -> Dict[str, Any]:
    logger.info("Generating CV summary", extra={"file_id": task_data.get("file_id")})
    async with AsyncSessionLocal() as session:
        return await run_cv_summary(task_data, session)
