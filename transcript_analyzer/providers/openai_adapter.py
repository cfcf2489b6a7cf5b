import time

import httpx
import openai

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

# Model families that reject ``max_tokens`` in favour of ``max_completion_tokens``.
_COMPLETION_TOKEN_MODELS = ("gpt-4o", "gpt-5", "o1", "o3")


class OpenAIProviderAdapter(BaseProviderAdapter):
    """Provider adapter built on the OpenAI chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        max_tokens: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
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
        params: dict[str, object] = {
            "model": model,
            "messages": [
                {"role": "system", "content": prompt},
                {
                    "role": "user",
                    "content": render_transcript_message(transcript, self._template),
                },
            ],
        }
        params[self._token_limit_param(model)] = self._max_tokens

        start = time.monotonic()
        try:
            completion = await self._client.chat.completions.create(**params)
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ProviderNetworkError(f"OpenAI network error: {exc}") from exc
        except openai.APIError as exc:
            raise ProviderNetworkError(f"OpenAI API error: {exc}") from exc
        processing_time_ms = int((time.monotonic() - start) * 1000)

        if not completion.choices:
            raise ProviderResponseError("OpenAI returned no choices")
        analysis = completion.choices[0].message.content or NO_ANALYSIS
        usage = getattr(completion, "usage", None)

        return ProviderResult(
            model=model,
            filename=filename,
            analysis=analysis,
            metadata=ResultMetadata(
                tokens=usage.total_tokens if usage is not None else None,
                processing_time_ms=processing_time_ms,
            ),
        )

    @staticmethod
    def _token_limit_param(model: str) -> str:
        if any(family in model for family in _COMPLETION_TOKEN_MODELS):
            return "max_completion_tokens"
        return "max_tokens"
