"""Prompt template management"""

from typing import List, Optional

from backend.app.models.prompt import PromptTemplate
from backend.app.repositories.prompt_repository import PromptRepository
from backend.app.services.cv_analysis_service import (
    CV_ANALYSIS_PROMPT_NAME,
    DEFAULT_CV_ANALYSIS_PROMPT,
)
from backend.app.core.exceptions import NotFoundException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

# name -> (content, description)
DEFAULT_PROMPTS = {
    CV_ANALYSIS_PROMPT_NAME: (
        DEFAULT_CV_ANALYSIS_PROMPT,
        "Prompt for analyzing candidate CVs and resumes",
    ),
}


class PromptService:
    """CRUD over named prompt templates plus seeding of the built-in ones"""

    def __init__(self, prompt_repository: PromptRepository):
        self.prompt_repo = prompt_repository

    async def list_prompts(self) -> List[PromptTemplate]:
        return await self.prompt_repo.list_all()

    async def get_prompt(self, name: str) -> PromptTemplate:
        template = await self.prompt_repo.get_by_name(name)
        if template is None:
            raise NotFoundException(f"Prompt not found: {name}")
        return template

    async def save_prompt(
        self,
        name: str,
        content: str,
        description: Optional[str] = None,
        updated_by: Optional[str] = None
    ) -> PromptTemplate:
        """Create the named template or replace its content"""
        return await self.prompt_repo.upsert(
            name, content, description=description, updated_by=updated_by
        )

    async def delete_prompt(self, name: str) -> None:
        if not await self.prompt_repo.delete(name):
            raise NotFoundException(f"Prompt not found: {name}")

    async def seed_default_prompts(self) -> List[str]:
        """
        Insert built-in templates that are missing

        Existing templates are left untouched, even if edited.

        Returns:
            Names of the templates that were created
        """
        created: List[str] = []
        for name, (content, description) in DEFAULT_PROMPTS.items():
            if await self.prompt_repo.get_by_name(name) is not None:
                logger.debug(f"Prompt {name} already exists, skipping")
                continue

            await self.prompt_repo.upsert(name, content, description=description)
            created.append(name)

        logger.info(f"Seeded {len(created)} prompt templates")
        return created
