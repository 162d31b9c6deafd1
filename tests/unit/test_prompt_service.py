"""Unit tests for prompt template management"""

import pytest

from backend.app.core.exceptions import NotFoundException
from backend.app.repositories.prompt_repository import PromptRepository
from backend.app.services.cv_analysis_service import DEFAULT_CV_ANALYSIS_PROMPT
from backend.app.services.prompt_service import PromptService


@pytest.fixture
def prompt_service(db_session):
    return PromptService(PromptRepository(db_session))


class TestPromptService:
    """Test cases for PromptService"""

    @pytest.mark.asyncio
    async def test_save_creates_then_replaces(self, prompt_service):
        created = await prompt_service.save_prompt("greeting", "Hello", description="Intro")
        updated = await prompt_service.save_prompt("greeting", "Hi there", updated_by="recruiter@x.io")

        assert created.id == updated.id
        assert updated.content == "Hi there"
        assert updated.updated_by == "recruiter@x.io"
        assert updated.last_updated

    @pytest.mark.asyncio
    async def test_save_defaults_updated_by(self, prompt_service):
        template = await prompt_service.save_prompt("greeting", "Hello")

        assert template.updated_by == "system"

    @pytest.mark.asyncio
    async def test_list_is_sorted_by_name(self, prompt_service):
        await prompt_service.save_prompt("zeta", "z")
        await prompt_service.save_prompt("alpha", "a")

        names = [template.name for template in await prompt_service.list_prompts()]

        assert names == ["alpha", "zeta"]

    @pytest.mark.asyncio
    async def test_get_unknown_prompt(self, prompt_service):
        with pytest.raises(NotFoundException):
            await prompt_service.get_prompt("missing")

    @pytest.mark.asyncio
    async def test_delete(self, prompt_service):
        await prompt_service.save_prompt("greeting", "Hello")

        await prompt_service.delete_prompt("greeting")

        with pytest.raises(NotFoundException):
            await prompt_service.get_prompt("greeting")
        with pytest.raises(NotFoundException):
            await prompt_service.delete_prompt("greeting")

    @pytest.mark.asyncio
    async def test_seed_creates_missing_defaults(self, prompt_service):
        created = await prompt_service.seed_default_prompts()

        template = await prompt_service.get_prompt("cv_analysis")
        assert created == ["cv_analysis"]
        assert template.content == DEFAULT_CV_ANALYSIS_PROMPT

    @pytest.mark.asyncio
    async def test_seed_keeps_edited_templates(self, prompt_service):
        await prompt_service.save_prompt("cv_analysis", "Edited prompt")

        created = await prompt_service.seed_default_prompts()

        assert created == []
        assert (await prompt_service.get_prompt("cv_analysis")).content == "Edited prompt"
