"""JSON shapes returned by the HTTP API."""

from datetime import datetime
from typing import Any

from transcript_analyzer.batch.models import BatchMetrics, BatchProgress, BatchSummary
from transcript_analyzer.providers.models import ProviderName


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _provider_counts(counts: dict[ProviderName, int]) -> dict[str, int]:
    return {f"{name.value}Complete": counts.get(name, 0) for name in ProviderName}


def metrics_to_dict(metrics: BatchMetrics) -> dict[str, Any]:
    return {
        "total": metrics.total,
        "pending": metrics.pending,
        "processing": metrics.processing,
        "completed": metrics.completed,
        "failed": metrics.failed,
        **_provider_counts(metrics.provider_complete),
        "timing": {
            "elapsedMs": metrics.timing.elapsed_ms,
            "estimatedCompletionMs": metrics.timing.estimated_completion_ms,
        },
    }


def progress_to_dict(progress: BatchProgress) -> dict[str, Any]:
    return {
        "batchId": progress.batch_id,
        "status": progress.status.value,
        "metrics": metrics_to_dict(progress.metrics),
        "currentFiles": {"processing": progress.processing_files},
    }


def summary_to_dict(summary: BatchSummary) -> dict[str, Any]:
    return {
        "id": summary.id,
        "status": summary.status.value,
        "totalFiles": summary.total_files,
        "completed": summary.completed,
        "failed": summary.failed,
        **_provider_counts(summary.provider_complete),
        "createdAt": _iso(summary.created_at),
        "startedAt": _iso(summary.started_at),
        "completedAt": _iso(summary.completed_at),
    }
