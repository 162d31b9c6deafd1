"""Prompt template repository"""

from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.prompt import PromptTemplate
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class PromptRepository:
    """Named prompt templates, looked up by their unique name"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, name: str) -> Optional[PromptTemplate]:
        result = await self.session.execute(
            select(PromptTemplate).where(PromptTemplate.name == name)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[PromptTemplate]:
        result = await self.session.execute(select(PromptTemplate).order_by(PromptTemplate.name))
        return list(result.scalars().all())

    async def upsert(
        self,
        name: str,
        content: str,
        description: Optional[str] = None,
        updated_by: Optional[str] = None
    ) -> PromptTemplate:
        """Create the template, or replace its content when it exists"""
        template = await self.get_by_name(name)
        stamp = datetime.now(timezone.utc).isoformat()

        if template is None:
            template = PromptTemplate(name=name)
            self.session.add(template)

        template.content = content
        template.description = description
        template.last_updated = stamp
        template.updated_by = updated_by or "system"

        await self.session.commit()
        await self.session.refresh(template)

        logger.info(f"Saved prompt template: {name}")
        return template

    async def delete(self, name: str) -> bool:
        template = await self.get_by_name(name)
        if template is None:
            return False

        await self.session.delete(template)
        await self.session.commit()
        logger.info(f"Deleted prompt template: {name}")
        return True
