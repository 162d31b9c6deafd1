"""Shared FastAPI dependencies for external collaborators"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.task_queue import TaskQueue, task_queue
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.repositories.prompt_repository import PromptRepository
from backend.app.services.cv_analysis_service import CVAnalysisService
from backend.app.services.llm_service import TextGenerationService
from backend.app.services.s3_service import S3Service


def get_storage() -> S3Service:
    return S3Service()


def get_text_generator() -> TextGenerationService:
    return TextGenerationService()


def get_task_queue() -> TaskQueue:
    return task_queue


async def get_file_repository(db: AsyncSession = Depends(get_db)) -> FileRepository:
    return FileRepository(db)


async def get_cv_analysis_service(
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    generator: TextGenerationService = Depends(get_text_generator),
    queue: TaskQueue = Depends(get_task_queue)
) -> CVAnalysisService:
    """Dependency to get the CV analysis pipeline"""
    return CVAnalysisService(
        file_repository=FileRepository(db),
        candidate_repository=CandidateRepository(db),
        prompt_repository=PromptRepository(db),
        storage=storage,
        generator=generator,
        task_queue=queue,
    )
