"""Candidate schemas for API requests and responses"""

from typing import List, Optional, Dict, Any
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, field_validator, ConfigDict

from backend.app.schemas.profile import CandidateProfile


class CandidateCreateRequest(BaseModel):
    """Request schema for creating a candidate"""
    name: str = Field(..., min_length=1, max_length=255, description="Full name")
    email: str = Field(..., min_length=3, max_length=255, description="Contact email")
    initials: Optional[str] = Field(None, max_length=10, description="Display initials, derived from name if omitted")
    phone: Optional[str] = Field(None, max_length=50)
    text_color: str = Field("", max_length=50)
    bg_color: str = Field("", max_length=50)
    user_id: Optional[UUID] = None
    position: Optional[str] = Field(None, max_length=255)
    status: Optional[str] = Field(None, max_length=100, description="Free-text stage label")
    applied_date: Optional[str] = Field(None, description="ISO date of application")
    recruiter: Optional[str] = None
    cover_letter: Optional[str] = None
    meeting_code: Optional[str] = None
    ai_score: Optional[float] = Field(None, ge=0, le=100)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Candidate name cannot be empty')
        return v.strip()

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if "@" not in v:
            raise ValueError('Invalid email address')
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Murphy",
                "email": "jane.murphy@example.com",
                "position": "Backend Engineer",
                "status": "Applied",
                "applied_date": "2025-03-02"
            }
        }
    )


class CandidateUpdateRequest(BaseModel):
    """Request schema for updating candidate scalar fields"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    initials: Optional[str] = Field(None, max_length=10)
    phone: Optional[str] = Field(None, max_length=50)
    text_color: Optional[str] = None
    bg_color: Optional[str] = None
    position: Optional[str] = None
    status: Optional[str] = None
    applied_date: Optional[str] = None
    recruiter: Optional[str] = None
    cover_letter: Optional[str] = None
    meeting_code: Optional[str] = None
    ai_score: Optional[float] = Field(None, ge=0, le=100)
    profile: Optional[Dict[str, Any]] = Field(None, description="Legacy flat summary")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError('Candidate name cannot be empty')
            return v.strip()
        return v


class CandidateResponse(BaseModel):
    """Response schema for a candidate record"""
    id: UUID
    name: str
    initials: str
    email: str
    phone: Optional[str] = None
    text_color: str = ""
    bg_color: str = ""
    user_id: Optional[UUID] = None
    cv_file_id: Optional[UUID] = None
    ai_score: Optional[float] = None
    status: Optional[str] = None
    position: Optional[str] = None
    applied_date: Optional[str] = None
    recruiter: Optional[str] = None
    cover_letter: Optional[str] = None
    meeting_code: Optional[str] = None
    last_activity: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None
    candidate_profile: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CandidateListResponse(BaseModel):
    """Response schema for candidate listing with pagination"""
    candidates: List[CandidateResponse]
    total: int
    skip: int
    limit: int
    has_more: bool


class BulkDeleteRequest(BaseModel):
    """Request schema for deleting several candidates at once"""
    candidate_ids: List[UUID] = Field(..., min_length=1, max_length=500)


class BulkDeleteResponse(BaseModel):
    success: bool
    message: str
    deleted_count: int
    failed_ids: List[UUID] = Field(default_factory=list)


class ProfileReplaceRequest(BaseModel):
    """Full replacement of a candidate's structured profile"""
    candidate_profile: CandidateProfile


class ExperienceSkillsResponse(BaseModel):
    """Table projection of a candidate's profile"""
    experience: Optional[str] = None
    skills: Optional[List[str]] = None


class CandidateContextResponse(BaseModel):
    """Markdown context block for the recruiter chat assistant"""
    candidate_id: UUID
    context: str
