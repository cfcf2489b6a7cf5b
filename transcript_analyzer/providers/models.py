from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ProviderName(str, Enum):
    """Tag selecting one of the three text-generation providers."""

    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"


@dataclass(frozen=True)
class ResultMetadata:
    """Usage details reported alongside an analysis."""

    tokens: int | None = None
    processing_time_ms: int | None = None


@dataclass(frozen=True)
class ProviderResult:
    """One provider's analysis of one transcript."""

    model: str
    filename: str
    analysis: str
    metadata: ResultMetadata = field(default_factory=ResultMetadata)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
