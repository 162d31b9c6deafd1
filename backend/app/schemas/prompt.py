"""Prompt template schemas"""

from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator, ConfigDict


class PromptUpsertRequest(BaseModel):
    """Create or replace a template by name"""
    content: str = Field(..., min_length=1, description="Template text")
    description: Optional[str] = None
    updated_by: Optional[str] = None

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Prompt content cannot be empty')
        return v


class PromptResponse(BaseModel):
    id: UUID
    name: str
    content: str
    description: Optional[str] = None
    last_updated: Optional[str] = None
    updated_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PromptListResponse(BaseModel):
    prompts: List[PromptResponse]


class SeedPromptsResponse(BaseModel):
    created: List[str]
