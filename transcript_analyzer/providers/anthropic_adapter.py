import time
from typing import Any

import anthropic
import httpx

from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.exceptions import (
    ProviderNetworkError,
    ProviderResponseError,
)
from transcript_analyzer.providers.models import ProviderResult, ResultMetadata
from transcript_analyzer.providers.prompt_loader import (
    load_prompt_template,
    render_transcript_message,
)

NO_ANALYSIS = "No analysis generated"


class AnthropicProviderAdapter(BaseProviderAdapter):
    """Provider adapter for Anthropic Claude models (Messages API)."""

    def __init__(self, *, api_key: str, max_tokens: int) -> None:
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        self._max_tokens = max_tokens
        self._template = load_prompt_template()

    async def analyze(
        self,
        *,
        transcript: str,
        prompt: str,
        model: str,
        filename: str,
    ) -> ProviderResult:
        user_message = render_transcript_message(transcript, self._template)

        start = time.monotonic()
        try:
            message = await self._client.messages.create(
                model=model,
                max_tokens=self._max_tokens,
                messages=[
                    {"role": "user", "content": f"{prompt}\n\n{user_message}"},
                ],
            )
        except (anthropic.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ProviderNetworkError(f"Anthropic network error: {exc}") from exc
        except anthropic.APIError as exc:
            raise ProviderNetworkError(f"Anthropic API error: {exc}") from exc
        processing_time_ms = int((time.monotonic() - start) * 1000)

        if message.content is None:
            raise ProviderResponseError("Anthropic returned no content blocks")

        return ProviderResult(
            model=model,
            filename=filename,
            analysis=self._extract_text(message.content),
            metadata=ResultMetadata(
                tokens=self._extract_tokens(message),
                processing_time_ms=processing_time_ms,
            ),
        )

    @staticmethod
    def _extract_text(blocks: list[Any]) -> str:
        if blocks and getattr(blocks[0], "type", None) == "text":
            return blocks[0].text or NO_ANALYSIS
        return NO_ANALYSIS

    @staticmethod
    def _extract_tokens(message: Any) -> int | None:
        usage = getattr(message, "usage", None)
        input_tokens = getattr(usage, "input_tokens", None)
        if not input_tokens:
            return None
        return input_tokens + (getattr(usage, "output_tokens", None) or 0)
