"""Text generation through the Anthropic Messages API"""

from typing import Any, Dict, List, Optional, Union

import anthropic
from anthropic import AsyncAnthropic

from backend.app.core.config import settings
from backend.app.core.exceptions import UpstreamException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

Content = Union[str, List[Dict[str, Any]]]


def document_block(data_b64: str, media_type: str = "application/pdf") -> Dict[str, Any]:
    """Message content block carrying a base64-encoded document"""
    return {
        "type": "document",
        "source": {
            "type": "base64",
            "media_type": media_type,
            "data": data_b64,
        },
    }


def text_block(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


class TextGenerationService:
    """Single-shot, non-streaming completions against one fixed model"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[AsyncAnthropic] = None
    ):
        self.api_key = api_key or settings.ANTHROPIC_API_KEY
        self.model = model or settings.ANTHROPIC_MODEL
        self._client = client

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            if not self.api_key:
                raise UpstreamException("anthropic", "ANTHROPIC_API_KEY is not set")
            self._client = AsyncAnthropic(
                api_key=self.api_key,
                timeout=settings.ANTHROPIC_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self._client

    async def complete(self, system: str, content: Content, max_tokens: int) -> str:
        """
        Send one user turn and return the reply text

        Args:
            system: System instruction
            content: User message text or list of content blocks
            max_tokens: Output token budget

        Returns:
            Concatenated text of the reply's text blocks

        Raises:
            UpstreamException: The API call failed or returned no text
        """
        logger.info(f"Requesting completion (model={self.model}, max_tokens={max_tokens})")

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic request failed: {e}")
            raise UpstreamException("anthropic", str(e))

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text:
            raise UpstreamException("anthropic", "Reply contained no text")

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(
                f"Completion received (input_tokens={usage.input_tokens}, "
                f"output_tokens={usage.output_tokens})"
            )
        return text
