"""Stored file schemas"""

from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


class FileResponse(BaseModel):
    """Response schema for stored file metadata"""
    id: UUID
    storage_key: str
    file_name: str
    file_size: int
    file_type: str
    file_category: str
    candidate_id: Optional[UUID] = None
    uploaded_at: Optional[datetime] = None
    analysis_id: Optional[str] = None
    status: Optional[str] = None
    cv_summary: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FileWithUrlResponse(FileResponse):
    url: Optional[str] = Field(None, description="Presigned download URL")


class UploadResponse(BaseModel):
    """Result of uploading a resume and running its analysis"""
    file_id: UUID
    analysis_id: str
    status: Optional[str] = None
    candidate_id: UUID
    ai_score: Optional[float] = None
    recommendation: Optional[str] = None
    error: Optional[str] = None


class AnalyzeRequest(BaseModel):
    """Re-run analysis on a stored file"""
    analysis_id: Optional[str] = Field(
        None,
        description="Correlation token; the file's reserved token is used when omitted"
    )


class AnalyzeResponse(BaseModel):
    file_id: UUID
    analysis_id: str
    status: Optional[str] = None
    candidate_id: Optional[UUID] = None
    ai_score: Optional[float] = None


class ResumeResponse(BaseModel):
    """A candidate's resume file with a download URL"""
    id: Optional[UUID] = None
    file_name: Optional[str] = None
    url: Optional[str] = None
    cv_summary: Optional[str] = None
    status: Optional[str] = None


class CandidateFilesResponse(BaseModel):
    files: List[FileWithUrlResponse]
