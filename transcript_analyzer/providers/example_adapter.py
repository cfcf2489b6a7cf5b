"""Offline provider adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseProviderAdapter and register the provider in ProviderFactory.
"""

from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.models import ProviderName, ProviderResult, ResultMetadata


class ExampleProviderAdapter(BaseProviderAdapter):
    """Adapter that returns a fixed analysis derived from its inputs.

    No network calls. Useful for local development and tests.
    """

    def __init__(self, provider: ProviderName) -> None:
        self._provider = provider

    async def analyze(
        self,
        *,
        transcript: str,
        prompt: str,
        model: str,
        filename: str,
    ) -> ProviderResult:
        words = len(transcript.split())
        analysis = (
            f"[{self._provider.value}:{model}] {prompt}\n\n"
            f"{filename}: {words} words analyzed."
        )
        return ProviderResult(
            model=model,
            filename=filename,
            analysis=analysis,
            metadata=ResultMetadata(tokens=words, processing_time_ms=0),
        )
