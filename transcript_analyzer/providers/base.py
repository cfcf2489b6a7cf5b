from abc import ABC, abstractmethod

from transcript_analyzer.providers.models import ProviderResult


class BaseProviderAdapter(ABC):
    """Contract for all text-generation provider adapters."""

    @abstractmethod
    async def analyze(
        self,
        *,
        transcript: str,
        prompt: str,
        model: str,
        filename: str,
    ) -> ProviderResult:
        """Run one analysis call against the provider.

        Args:
            transcript: Full transcript text, the subject of the analysis.
            prompt: Analysis instruction shared by all providers.
            model: Provider model identifier, passed through verbatim.
            filename: Original filename, echoed into the result.

        Returns:
            ProviderResult with the generated text and usage metadata.

        Raises:
            ProviderError: on any failure. No retry is attempted.
        """
