from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.factory import ProviderFactory
from transcript_analyzer.providers.models import ProviderName, ProviderResult, ResultMetadata

__all__ = [
    "BaseProviderAdapter",
    "ProviderFactory",
    "ProviderName",
    "ProviderResult",
    "ResultMetadata",
]
