"""Unit tests for the Anthropic text generation wrapper"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from backend.app.core.exceptions import UpstreamException
from backend.app.services.llm_service import TextGenerationService, document_block, text_block


def mock_client(*blocks, side_effect=None):
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(
            content=list(blocks),
            usage=SimpleNamespace(input_tokens=120, output_tokens=40),
        ),
        side_effect=side_effect,
    )
    return client


class TestTextGenerationService:
    """Test cases for TextGenerationService"""

    @pytest.mark.asyncio
    async def test_complete_joins_text_blocks(self):
        client = mock_client(
            SimpleNamespace(type="text", text="Hello "),
            SimpleNamespace(type="tool_use", id="t1"),
            SimpleNamespace(type="text", text="world"),
        )
        service = TextGenerationService(api_key="test", model="claude-test", client=client)

        reply = await service.complete("Be brief.", "Say hello", max_tokens=50)

        assert reply == "Hello world"
        client.messages.create.assert_called_once_with(
            model="claude-test",
            max_tokens=50,
            system="Be brief.",
            messages=[{"role": "user", "content": "Say hello"}],
        )

    @pytest.mark.asyncio
    async def test_content_blocks_are_passed_through(self):
        client = mock_client(SimpleNamespace(type="text", text="{}"))
        service = TextGenerationService(api_key="test", client=client)
        content = [document_block("ZmFrZQ=="), text_block("Analyze")]

        await service.complete("system", content, max_tokens=4000)

        messages = client.messages.create.call_args.kwargs["messages"]
        assert messages[0]["content"][0]["source"] == {
            "type": "base64",
            "media_type": "application/pdf",
            "data": "ZmFrZQ==",
        }
        assert messages[0]["content"][1] == {"type": "text", "text": "Analyze"}

    @pytest.mark.asyncio
    async def test_api_error_becomes_upstream_exception(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client = mock_client(side_effect=anthropic.APIConnectionError(request=request))
        service = TextGenerationService(api_key="test", client=client)

        with pytest.raises(UpstreamException) as exc_info:
            await service.complete("system", "hi", max_tokens=10)

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == {"service": "anthropic"}

    @pytest.mark.asyncio
    async def test_reply_without_text(self):
        client = mock_client(SimpleNamespace(type="tool_use", id="t1"))
        service = TextGenerationService(api_key="test", client=client)

        with pytest.raises(UpstreamException, match="no text"):
            await service.complete("system", "hi", max_tokens=10)

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service = TextGenerationService(api_key="")
        service.api_key = ""

        with pytest.raises(UpstreamException, match="ANTHROPIC_API_KEY"):
            await service.complete("system", "hi", max_tokens=10)
