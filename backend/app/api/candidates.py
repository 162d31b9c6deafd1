"""Candidate API endpoints"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.api.dependencies import get_file_repository, get_storage
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.services.candidate_service import CandidateService
from backend.app.services.profile_builder import validate_section_name
from backend.app.services.s3_service import S3Service
from backend.app.schemas.candidate import (
    CandidateCreateRequest,
    CandidateUpdateRequest,
    CandidateResponse,
    CandidateListResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    ProfileReplaceRequest,
    ExperienceSkillsResponse,
    CandidateContextResponse,
)
from backend.app.schemas.file import CandidateFilesResponse, FileWithUrlResponse
from backend.app.schemas.profile import SECTION_MODELS, dump_profile_model
from backend.app.core.exceptions import ValidationException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def get_candidate_service(db: AsyncSession = Depends(get_db)) -> CandidateService:
    """Dependency to get candidate service"""
    return CandidateService(CandidateRepository(db), FileRepository(db))


@router.get("", response_model=CandidateListResponse)
async def list_candidates(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=500, description="Maximum records to return"),
    search: Optional[str] = Query(None, description="Match against name, email or position"),
    status_filter: Optional[str] = Query(None, alias="status", description="Stage label"),
    user_id: Optional[UUID] = Query(None, description="Owning account"),
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """
    List candidates, newest first

    Every returned profile carries a numeric `cv.score`.
    """
    records, total = await candidate_service.list_candidates(
        skip=skip, limit=limit, search=search, status=status_filter, user_id=user_id
    )
    return CandidateListResponse(
        candidates=[CandidateResponse.model_validate(record) for record in records],
        total=total,
        skip=skip,
        limit=limit,
        has_more=skip + len(records) < total
    )


@router.post("", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    candidate_data: CandidateCreateRequest,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """Create a candidate without a structured profile"""
    logger.info(f"Candidate creation request: {candidate_data.email}")
    record = await candidate_service.create_candidate(candidate_data.model_dump())
    return CandidateResponse.model_validate(record)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_candidates(
    request: BulkDeleteRequest,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """
    Delete several candidates with their applications and interview requests

    Unknown ids are listed in `failed_ids` instead of failing the request.
    """
    result = await candidate_service.bulk_delete_candidates(request.candidate_ids)
    return BulkDeleteResponse(**result)


@router.get("/by-meeting-code/{meeting_code}", response_model=CandidateResponse)
async def get_candidate_by_meeting_code(
    meeting_code: str,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    record = await candidate_service.get_candidate_by_meeting_code(meeting_code)
    return CandidateResponse.model_validate(record)


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    candidate_id: UUID,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    record = await candidate_service.get_candidate(candidate_id)
    return CandidateResponse.model_validate(record)


@router.put("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    candidate_id: UUID,
    updates: CandidateUpdateRequest,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """
    Update scalar candidate fields

    Only provided fields change. The structured profile has its own endpoints.
    """
    record = await candidate_service.update_candidate(
        candidate_id, updates.model_dump(exclude_unset=True)
    )
    return CandidateResponse.model_validate(record)


@router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate(
    candidate_id: UUID,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """Delete a candidate with its applications and interview requests"""
    await candidate_service.delete_candidate(candidate_id)


@router.put("/{candidate_id}/profile", response_model=CandidateResponse)
async def replace_candidate_profile(
    candidate_id: UUID,
    request: ProfileReplaceRequest,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """Replace the whole structured profile"""
    record = await candidate_service.replace_profile(
        candidate_id, dump_profile_model(request.candidate_profile)
    )
    return CandidateResponse.model_validate(record)


@router.patch("/{candidate_id}/profile/{section}", response_model=CandidateResponse)
async def patch_candidate_profile_section(
    candidate_id: UUID,
    section: str = Path(..., description="One of: personal, career, interview, skills, cv, skillInsights"),
    value: Dict[str, Any] = Body(..., description="New content of the section"),
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """
    Replace exactly one profile section

    The other sections and the recommendation are left as they are. A
    candidate without a profile starts from the blank default.
    """
    validate_section_name(section)
    try:
        validated = SECTION_MODELS[section].model_validate(value)
    except ValidationError as e:
        raise ValidationException(
            f"Invalid {section} section",
            details={"errors": e.errors(include_url=False, include_context=False)}
        )

    record = await candidate_service.patch_profile_section(
        candidate_id, section, dump_profile_model(validated)
    )
    return CandidateResponse.model_validate(record)


@router.post("/{candidate_id}/profile/default", response_model=CandidateResponse)
async def generate_default_profile(
    candidate_id: UUID,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """Give a candidate a placeholder profile if it has none"""
    record = await candidate_service.generate_default_profile(candidate_id)
    return CandidateResponse.model_validate(record)


@router.get("/{candidate_id}/experience-skills", response_model=ExperienceSkillsResponse)
async def get_experience_and_skills(
    candidate_id: UUID,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    result = await candidate_service.get_experience_and_skills(candidate_id)
    return ExperienceSkillsResponse(**result)


@router.get("/{candidate_id}/context", response_model=CandidateContextResponse)
async def get_candidate_context(
    candidate_id: UUID,
    candidate_service: CandidateService = Depends(get_candidate_service)
):
    """Markdown summary of a candidate for the chat assistant"""
    context = await candidate_service.get_chat_context(candidate_id)
    return CandidateContextResponse(candidate_id=candidate_id, context=context)


@router.get("/{candidate_id}/files", response_model=CandidateFilesResponse)
async def list_candidate_files(
    candidate_id: UUID,
    candidate_service: CandidateService = Depends(get_candidate_service),
    file_repo: FileRepository = Depends(get_file_repository),
    storage: S3Service = Depends(get_storage)
):
    """All files stored for a candidate, newest first, with download URLs"""
    await candidate_service.get_candidate(candidate_id)
    files = await file_repo.list_for_candidate(candidate_id)

    responses = []
    for candidate_file in files:
        response = FileWithUrlResponse.model_validate(candidate_file)
        response.url = await storage.generate_presigned_url(candidate_file.storage_key)
        responses.append(response)
    return CandidateFilesResponse(files=responses)
