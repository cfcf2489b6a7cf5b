import time
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

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


class GeminiProviderAdapter(BaseProviderAdapter):
    """Provider adapter for Google Gemini models."""

    def __init__(self, *, api_key: str, max_tokens: int) -> None:
        genai.configure(api_key=api_key)
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
        generative_model = genai.GenerativeModel(model)
        user_message = render_transcript_message(transcript, self._template)

        start = time.monotonic()
        try:
            response = await generative_model.generate_content_async(
                [prompt, f"\n\n{user_message}"],
                generation_config={"max_output_tokens": self._max_tokens},
            )
        except google_exceptions.GoogleAPIError as exc:
            raise ProviderNetworkError(f"Gemini API error: {exc}") from exc
        processing_time_ms = int((time.monotonic() - start) * 1000)

        try:
            analysis = response.text
        except ValueError as exc:
            # Raised by the SDK when the candidate was blocked or carries no text.
            raise ProviderResponseError(f"Gemini returned no text: {exc}") from exc

        return ProviderResult(
            model=model,
            filename=filename,
            analysis=analysis,
            metadata=ResultMetadata(
                tokens=self._extract_tokens(response),
                processing_time_ms=processing_time_ms,
            ),
        )

    @staticmethod
    def _extract_tokens(response: Any) -> int | None:
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return None
        return getattr(usage, "total_token_count", None) or None
