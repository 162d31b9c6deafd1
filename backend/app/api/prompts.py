"""Prompt template API endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.repositories.prompt_repository import PromptRepository
from backend.app.services.prompt_service import PromptService
from backend.app.schemas.prompt import (
    PromptUpsertRequest,
    PromptResponse,
    PromptListResponse,
    SeedPromptsResponse,
)
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def get_prompt_service(db: AsyncSession = Depends(get_db)) -> PromptService:
    """Dependency to get prompt service"""
    return PromptService(PromptRepository(db))


@router.get("", response_model=PromptListResponse)
async def list_prompts(prompt_service: PromptService = Depends(get_prompt_service)):
    prompts = await prompt_service.list_prompts()
    return PromptListResponse(prompts=[PromptResponse.model_validate(p) for p in prompts])


@router.post("/seed", response_model=SeedPromptsResponse)
async def seed_prompts(prompt_service: PromptService = Depends(get_prompt_service)):
    """Create the built-in templates that do not exist yet"""
    created = await prompt_service.seed_default_prompts()
    return SeedPromptsResponse(created=created)


@router.get("/{name}", response_model=PromptResponse)
async def get_prompt(name: str, prompt_service: PromptService = Depends(get_prompt_service)):
    return PromptResponse.model_validate(await prompt_service.get_prompt(name))


@router.put("/{name}", response_model=PromptResponse)
async def save_prompt(
    name: str,
    request: PromptUpsertRequest,
    prompt_service: PromptService = Depends(get_prompt_service)
):
    """
    Create or replace a template by name

    Saving `cv_analysis` changes the instruction used by the next CV analysis.
    """
    logger.info(f"Saving prompt template: {name}")
    template = await prompt_service.save_prompt(
        name,
        request.content,
        description=request.description,
        updated_by=request.updated_by
    )
    return PromptResponse.model_validate(template)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(name: str, prompt_service: PromptService = Depends(get_prompt_service)):
    await prompt_service.delete_prompt(name)
