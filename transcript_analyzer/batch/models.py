import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from transcript_analyzer.batch.exceptions import BatchStateError
from transcript_analyzer.providers.models import ProviderName, ProviderResult


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class BatchStatus(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchStatus.COMPLETED, BatchStatus.FAILED, BatchStatus.CANCELLED)


class FileStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadedTranscript:
    """An uploaded transcript as stored on disk by the ingress layer."""

    original_name: str
    path: Path
    size_bytes: int = 0


@dataclass(frozen=True)
class JobConfig:
    """Shared configuration for every file in a batch.

    ``job_description`` is kept for the submitter's reference only and is
    never sent to a provider.
    """

    job_description: str
    prompt: str
    models: dict[ProviderName, str]


@dataclass
class FileRecord:
    """Processing state of one transcript within a batch."""

    filename: str
    content: str
    id: str = field(default_factory=new_id)
    status: FileStatus = FileStatus.PENDING
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: int | None = None
    results: dict[ProviderName, ProviderResult] = field(default_factory=dict)
    error: str | None = None
    retry_count: int = 0  # reserved, never incremented

    def set_result(self, provider: ProviderName, result: ProviderResult) -> None:
        """Store a provider result. A stored result is never replaced."""
        if provider in self.results:
            raise BatchStateError(
                f"Result for provider '{provider.value}' already set on file {self.id}"
            )
        self.results[provider] = result


@dataclass
class BatchTiming:
    elapsed_ms: int = 0
    estimated_completion_ms: int | None = None


@dataclass
class BatchMetrics:
    """Aggregate counters for a batch.

    ``pending + processing + completed + failed == total`` at all times.
    """

    total: int
    pending: int
    processing: int = 0
    completed: int = 0
    failed: int = 0
    provider_complete: dict[ProviderName, int] = field(
        default_factory=lambda: {name: 0 for name in ProviderName}
    )
    timing: BatchTiming = field(default_factory=BatchTiming)

    @classmethod
    def initial(cls, total: int) -> "BatchMetrics":
        return cls(total=total, pending=total)

    def copy(self) -> "BatchMetrics":
        return BatchMetrics(
            total=self.total,
            pending=self.pending,
            processing=self.processing,
            completed=self.completed,
            failed=self.failed,
            provider_complete=dict(self.provider_complete),
            timing=BatchTiming(
                elapsed_ms=self.timing.elapsed_ms,
                estimated_completion_ms=self.timing.estimated_completion_ms,
            ),
        )


@dataclass
class Batch:
    """One submission: its files, configuration and progress."""

    files: list[FileRecord]
    job_config: JobConfig | None
    metrics: BatchMetrics
    id: str = field(default_factory=new_id)
    status: BatchStatus = BatchStatus.CREATED
    created_at: datetime = field(default_factory=utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class BatchProgress:
    batch_id: str
    status: BatchStatus
    metrics: BatchMetrics
    processing_files: list[str]


@dataclass(frozen=True)
class BatchSummary:
    id: str
    status: BatchStatus
    total_files: int
    completed: int
    failed: int
    provider_complete: dict[ProviderName, int]
    created_at: datetime
    started_at: datetime | None
    completed_at: datetime | None


@dataclass(frozen=True)
class FileResults:
    """Whatever provider results exist for one file."""

    filename: str
    results: dict[ProviderName, ProviderResult]


@dataclass(frozen=True)
class MultiModelResults:
    batch_id: str
    files: list[FileResults]
