from typing import ClassVar

from transcript_analyzer.config.settings import Settings
from transcript_analyzer.providers.anthropic_adapter import AnthropicProviderAdapter
from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.example_adapter import ExampleProviderAdapter
from transcript_analyzer.providers.gemini_adapter import GeminiProviderAdapter
from transcript_analyzer.providers.models import ProviderName
from transcript_analyzer.providers.openai_adapter import OpenAIProviderAdapter


class ProviderFactory:
    """Creates one adapter per provider tag from application settings."""

    BACKENDS: ClassVar[tuple[str, ...]] = ("live", "example")

    @classmethod
    def create_all(cls, settings: Settings) -> dict[ProviderName, BaseProviderAdapter]:
        """Build the adapter mapping used for every fan-out."""
        backend = settings.provider_backend.lower()
        if backend not in cls.BACKENDS:
            raise ValueError(
                f"Unknown provider backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        if backend == "example":
            return {name: ExampleProviderAdapter(name) for name in ProviderName}
        return {name: cls.create(name, settings) for name in ProviderName}

    @classmethod
    def create(cls, provider: ProviderName, settings: Settings) -> BaseProviderAdapter:
        """Create the live adapter for a single provider."""
        if provider is ProviderName.OPENAI:
            return OpenAIProviderAdapter(
                api_key=settings.openai_api_key,
                max_tokens=settings.openai_max_tokens,
            )
        if provider is ProviderName.CLAUDE:
            return AnthropicProviderAdapter(
                api_key=settings.anthropic_api_key,
                max_tokens=settings.anthropic_max_tokens,
            )
        if provider is ProviderName.GEMINI:
            return GeminiProviderAdapter(
                api_key=settings.gemini_api_key,
                max_tokens=settings.gemini_max_tokens,
            )
        raise ValueError(f"Unknown provider '{provider}'")

    @classmethod
    def default_models(cls, settings: Settings) -> dict[ProviderName, str]:
        """Configured default model identifiers per provider."""
        return {
            ProviderName.OPENAI: settings.openai_default_model,
            ProviderName.CLAUDE: settings.anthropic_default_model,
            ProviderName.GEMINI: settings.gemini_default_model,
        }
