"""Stored CV API endpoints: upload, analysis, lookup"""

import os
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.dependencies import get_cv_analysis_service, get_file_repository, get_storage
from backend.app.core.config import settings
from backend.app.core.database import get_db
from backend.app.core.exceptions import NotFoundException, SmarterAIException, ValidationException
from backend.app.core.logging import get_logger
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.schemas.file import (
    AnalyzeRequest,
    AnalyzeResponse,
    FileWithUrlResponse,
    ResumeResponse,
    UploadResponse,
)
from backend.app.services.cv_analysis_service import CVAnalysisService, new_analysis_id
from backend.app.services.profile_builder import recommendation_for
from backend.app.services.s3_service import S3Service

logger = get_logger(__name__)

router = APIRouter()


def _validate_upload(filename: Optional[str], size: int) -> None:
    if not filename:
        raise ValidationException("Filename is required")

    extension = os.path.splitext(filename)[1].lower()
    if extension not in settings.ALLOWED_EXTENSIONS:
        raise ValidationException(
            f"Unsupported file type: {extension or 'none'}",
            details={"allowed": settings.ALLOWED_EXTENSIONS}
        )

    if size == 0:
        raise ValidationException("Uploaded file is empty")
    if size > settings.MAX_UPLOAD_SIZE:
        raise ValidationException(
            "File is too large",
            details={"max_bytes": settings.MAX_UPLOAD_SIZE, "size": size}
        )


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_cv(
    file: UploadFile = File(...),
    candidate_id: UUID = Form(...),
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    analysis_service: CVAnalysisService = Depends(get_cv_analysis_service)
):
    """
    Upload a candidate's CV and analyze it

    **Process:**
    1. Stores the PDF in S3 and records the file
    2. Reserves a fresh analysis id for the file and links it as the candidate's CV
    3. Runs the analysis; the narrative summary is generated later by a worker

    An analysis failure does not undo the upload: the file is kept with
    status `error` and the failure is reported in `error`.
    """
    candidate_repo = CandidateRepository(db)
    file_repo = FileRepository(db)

    candidate = await candidate_repo.get_by_id(candidate_id)
    if not candidate:
        raise NotFoundException(f"Candidate not found: {candidate_id}")

    content = await file.read()
    _validate_upload(file.filename, len(content))
    content_type = file.content_type or "application/pdf"

    logger.info(f"CV upload: {file.filename}", extra={"candidate_id": candidate_id})

    storage_key = await storage.upload_cv(content, str(candidate_id), file.filename, content_type)
    candidate_file = await file_repo.create({
        "storage_key": storage_key,
        "file_name": file.filename,
        "file_size": len(content),
        "file_type": content_type,
        "file_category": "resume",
        "candidate_id": candidate_id,
    })

    file_id = candidate_file.id
    analysis_id = new_analysis_id()
    await file_repo.reserve_analysis_id(file_id, analysis_id)
    await candidate_repo.update(candidate, {"cv_file_id": file_id})

    try:
        outcome = await analysis_service.analyze_stored_cv(file_id, analysis_id)
    except SmarterAIException as e:
        logger.warning(
            f"Uploaded CV could not be analyzed: {e.message}",
            extra={"file_id": file_id, "analysis_id": analysis_id}
        )
        return UploadResponse(
            file_id=file_id,
            analysis_id=analysis_id,
            status="error",
            candidate_id=candidate_id,
            error=e.message
        )

    return UploadResponse(
        file_id=file_id,
        analysis_id=analysis_id,
        status=outcome["status"],
        candidate_id=candidate_id,
        ai_score=outcome["ai_score"],
        recommendation=outcome["candidate_profile"].get("recommendation")
        or recommendation_for(outcome["ai_score"])
    )


@router.post("/{file_id}/analyze", response_model=AnalyzeResponse)
async def analyze_file(
    file_id: UUID,
    request: Optional[AnalyzeRequest] = Body(None),
    file_repo: FileRepository = Depends(get_file_repository),
    analysis_service: CVAnalysisService = Depends(get_cv_analysis_service)
):
    """
    Run (or re-run) the analysis of a stored CV

    Without an explicit `analysis_id` the file's reserved token is reused,
    or a new one is reserved when the file has none.
    """
    candidate_file = await file_repo.get_by_id(file_id)
    if candidate_file is None:
        raise NotFoundException(f"File not found: {file_id}")

    analysis_id = request.analysis_id if request and request.analysis_id else None
    if analysis_id is None:
        analysis_id = candidate_file.analysis_id
    if analysis_id is None:
        analysis_id = new_analysis_id()
        await file_repo.reserve_analysis_id(file_id, analysis_id)

    outcome = await analysis_service.analyze_stored_cv(file_id, analysis_id)
    return AnalyzeResponse(
        file_id=file_id,
        analysis_id=analysis_id,
        status=outcome["status"],
        candidate_id=outcome["candidate_id"],
        ai_score=outcome["ai_score"]
    )


@router.get("/candidate/{candidate_id}/resume", response_model=ResumeResponse)
async def get_candidate_resume(
    candidate_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage)
):
    """The candidate's linked CV, or their most recent resume upload"""
    candidate = await CandidateRepository(db).get_by_id(candidate_id)
    if not candidate:
        raise NotFoundException(f"Candidate not found: {candidate_id}")

    resume = await FileRepository(db).get_resume_for_candidate(candidate.id, candidate.cv_file_id)
    if resume is None:
        raise NotFoundException(f"No resume stored for candidate: {candidate_id}")

    return ResumeResponse(
        id=resume.id,
        file_name=resume.file_name,
        url=await storage.generate_presigned_url(resume.storage_key),
        cv_summary=resume.cv_summary,
        status=resume.status
    )


@router.get("/{file_id}", response_model=FileWithUrlResponse)
async def get_file(
    file_id: UUID,
    file_repo: FileRepository = Depends(get_file_repository),
    storage: S3Service = Depends(get_storage)
):
    candidate_file = await file_repo.get_by_id(file_id)
    if candidate_file is None:
        raise NotFoundException(f"File not found: {file_id}")

    response = FileWithUrlResponse.model_validate(candidate_file)
    response.url = await storage.generate_presigned_url(candidate_file.storage_key)
    return response
