"""Batch tracking: creation, multi-provider processing, progress and results.

All state lives in the BatchRegistry and is mutated from a single event loop.
Counter updates never span an ``await``, so a progress query issued while a
batch is running always sees consistent metrics.
"""

import asyncio
from collections.abc import Mapping, Sequence
from datetime import datetime

from transcript_analyzer.batch.exceptions import (
    BatchNotFoundError,
    BatchStateError,
    BatchValidationError,
    ConfigMissingError,
)
from transcript_analyzer.batch.file_loader import FileLoader
from transcript_analyzer.batch.models import (
    Batch,
    BatchMetrics,
    BatchProgress,
    BatchStatus,
    BatchSummary,
    FileRecord,
    FileResults,
    FileStatus,
    JobConfig,
    MultiModelResults,
    UploadedTranscript,
    utcnow,
)
from transcript_analyzer.batch.registry import BatchRegistry
from transcript_analyzer.logging.logger import Log
from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.exceptions import ProviderTimeoutError
from transcript_analyzer.providers.models import ProviderName, ProviderResult

ALL_PROVIDERS_FAILED = "All providers failed to process the transcript"


def _ms_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() * 1000)


class BatchTracker:
    """Owns the lifecycle of every batch held in the registry."""

    def __init__(
        self,
        registry: BatchRegistry,
        adapters: Mapping[ProviderName, BaseProviderAdapter],
        *,
        file_loader: FileLoader | None = None,
        inter_file_delay_seconds: float = 2.0,
        provider_timeout_seconds: float | None = None,
    ) -> None:
        self._registry = registry
        self._adapters = dict(adapters)
        self._file_loader = file_loader if file_loader is not None else FileLoader()
        self._inter_file_delay_seconds = inter_file_delay_seconds
        self._provider_timeout_seconds = provider_timeout_seconds

    async def create_batch(
        self,
        files: Sequence[UploadedTranscript],
        job_config: JobConfig,
    ) -> str:
        """Read every file and register a new batch in ``created`` status.

        Raises:
            BatchValidationError: if no files are given.
            FileReadError: if any file cannot be read. Nothing is registered.
        """
        if not files:
            raise BatchValidationError("A batch needs at least one transcript file")

        contents = await asyncio.gather(*(self._file_loader.load(f) for f in files))
        records = [
            FileRecord(filename=transcript.original_name, content=content)
            for transcript, content in zip(files, contents)
        ]
        batch = Batch(
            files=records,
            job_config=job_config,
            metrics=BatchMetrics.initial(len(records)),
        )
        self._registry.add(batch)
        total_bytes = sum(f.size_bytes for f in files)
        Log.info(
            f"Created batch {batch.id} with {len(records)} transcript file(s), "
            f"{total_bytes} bytes"
        )
        return batch.id

    async def start_processing(self, batch_id: str) -> None:
        """Process every file of a batch, one file at a time.

        Each file is sent to all providers concurrently. Provider failures are
        contained per file; any other error marks the batch ``failed`` and is
        re-raised.

        Raises:
            BatchNotFoundError: if the batch does not exist.
            ConfigMissingError: if the batch has no job configuration.
            BatchStateError: if the batch was already started.
        """
        batch = self._require(batch_id)
        if batch.job_config is None:
            raise ConfigMissingError(f"Batch {batch_id} has no job configuration")
        if batch.status is BatchStatus.CANCELLED:
            Log.info(f"Batch {batch_id} was cancelled before processing started")
            return
        if batch.status is not BatchStatus.CREATED:
            raise BatchStateError(
                f"Batch {batch_id} cannot start from status '{batch.status.value}'"
            )

        batch.status = BatchStatus.PROCESSING
        batch.started_at = utcnow()
        Log.info(
            f"Starting batch {batch_id}: {batch.metrics.total} file(s), "
            f"{len(self._adapters)} provider(s) per file"
        )

        try:
            await self._process_files(batch, batch.job_config)
        except asyncio.CancelledError:
            self._mark_failed(batch, "processing was interrupted")
            raise
        except Exception as exc:
            self._mark_failed(batch, str(exc))
            raise

        if batch.status is BatchStatus.CANCELLED:
            Log.info(
                f"Batch {batch_id} stopped after cancellation, "
                f"{batch.metrics.pending} file(s) left unprocessed"
            )
            return
        batch.status = BatchStatus.COMPLETED
        batch.completed_at = utcnow()
        batch.metrics.timing.elapsed_ms = _ms_between(batch.started_at, batch.completed_at)
        batch.metrics.timing.estimated_completion_ms = None
        Log.info(
            f"Batch {batch_id} completed: {batch.metrics.completed} succeeded, "
            f"{batch.metrics.failed} failed"
        )

    async def _process_files(self, batch: Batch, config: JobConfig) -> None:
        last_index = len(batch.files) - 1
        for index, record in enumerate(batch.files):
            if batch.status is BatchStatus.CANCELLED:
                return
            await self._process_file(batch, record, config)
            if index < last_index:
                Log.debug(f"Waiting {self._inter_file_delay_seconds}s before next file")
                await asyncio.sleep(self._inter_file_delay_seconds)

    async def _process_file(
        self,
        batch: Batch,
        record: FileRecord,
        config: JobConfig,
    ) -> None:
        record.status = FileStatus.PROCESSING
        record.started_at = utcnow()
        batch.metrics.pending -= 1
        batch.metrics.processing += 1
        Log.info(f"Processing {record.filename}")

        providers = list(self._adapters)
        outcomes = await asyncio.gather(
            *(self._call_provider(provider, record, config) for provider in providers),
            return_exceptions=True,
        )

        succeeded = 0
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, Exception):
                Log.warning(f"{provider.value} failed for {record.filename}: {outcome}")
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            record.set_result(provider, outcome)
            batch.metrics.provider_complete[provider] += 1
            succeeded += 1
            Log.info(f"{provider.value} completed for {record.filename}")

        if succeeded:
            record.status = FileStatus.COMPLETED
            batch.metrics.completed += 1
            Log.info(
                f"Completed {record.filename} "
                f"({succeeded}/{len(providers)} providers succeeded)"
            )
        else:
            record.status = FileStatus.FAILED
            record.error = ALL_PROVIDERS_FAILED
            batch.metrics.failed += 1
            Log.error(f"Failed {record.filename} (all providers failed)")
        batch.metrics.processing -= 1

        record.ended_at = utcnow()
        record.duration_ms = _ms_between(record.started_at, record.ended_at)

    async def _call_provider(
        self,
        provider: ProviderName,
        record: FileRecord,
        config: JobConfig,
    ) -> ProviderResult:
        model = config.models.get(provider)
        if not model:
            raise ConfigMissingError(f"No model configured for provider '{provider.value}'")
        call = self._adapters[provider].analyze(
            transcript=record.content,
            prompt=config.prompt,
            model=model,
            filename=record.filename,
        )
        if not self._provider_timeout_seconds:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._provider_timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                f"{provider.value} did not respond within "
                f"{self._provider_timeout_seconds}s"
            ) from exc

    def _mark_failed(self, batch: Batch, reason: str) -> None:
        Log.error(f"Batch {batch.id} failed: {reason}")
        if batch.status.is_terminal:
            return
        batch.status = BatchStatus.FAILED
        if batch.started_at is not None:
            batch.metrics.timing.elapsed_ms = _ms_between(batch.started_at, utcnow())
        batch.metrics.timing.estimated_completion_ms = None

    def get_progress(self, batch_id: str) -> BatchProgress:
        """Snapshot of status, metrics and the files currently in flight."""
        batch = self._require(batch_id)
        self._refresh_timing(batch)
        return BatchProgress(
            batch_id=batch.id,
            status=batch.status,
            metrics=batch.metrics.copy(),
            processing_files=[
                f.filename for f in batch.files if f.status is FileStatus.PROCESSING
            ],
        )

    def get_results(self, batch_id: str) -> MultiModelResults:
        """Per-file provider results present right now, possibly partial."""
        batch = self._require(batch_id)
        return MultiModelResults(
            batch_id=batch.id,
            files=[FileResults(filename=f.filename, results=dict(f.results)) for f in batch.files],
        )

    def list_batches(self) -> list[BatchSummary]:
        return [
            BatchSummary(
                id=batch.id,
                status=batch.status,
                total_files=batch.metrics.total,
                completed=batch.metrics.completed,
                failed=batch.metrics.failed,
                provider_complete=dict(batch.metrics.provider_complete),
                created_at=batch.created_at,
                started_at=batch.started_at,
                completed_at=batch.completed_at,
            )
            for batch in self._registry.all()
        ]

    def cancel_batch(self, batch_id: str) -> bool:
        """Flag a batch as cancelled.

        The running loop stops before its next file; provider calls already
        in flight are left to settle.
        """
        batch = self._registry.get(batch_id)
        if batch is None or batch.status.is_terminal:
            return False
        if batch.status is BatchStatus.PROCESSING:
            self._refresh_timing(batch)
        batch.status = BatchStatus.CANCELLED
        batch.metrics.timing.estimated_completion_ms = None
        Log.info(f"Batch {batch_id} cancelled")
        return True

    def delete_batch(self, batch_id: str) -> bool:
        batch = self._registry.get(batch_id)
        if batch is None or batch.status is BatchStatus.PROCESSING:
            return False
        self._registry.remove(batch_id)
        Log.info(f"Batch {batch_id} deleted")
        return True

    def health(self) -> dict[str, dict[str, int]]:
        """Aggregate counts across all batches."""
        batches = self._registry.all()
        by_status = {status.value: 0 for status in BatchStatus}
        for batch in batches:
            by_status[batch.status.value] += 1
        return {
            "batches": {"total": len(batches), **by_status},
            "processing": {
                "total_files_processed": sum(b.metrics.completed for b in batches),
                "total_files_failed": sum(b.metrics.failed for b in batches),
            },
        }

    def _require(self, batch_id: str) -> Batch:
        batch = self._registry.get(batch_id)
        if batch is None:
            raise BatchNotFoundError(f"Batch {batch_id} not found")
        return batch

    @staticmethod
    def _refresh_timing(batch: Batch) -> None:
        if batch.status is not BatchStatus.PROCESSING or batch.started_at is None:
            return
        metrics = batch.metrics
        elapsed_ms = _ms_between(batch.started_at, utcnow())
        metrics.timing.elapsed_ms = elapsed_ms
        finished = metrics.completed + metrics.failed
        remaining = metrics.pending + metrics.processing
        if finished and remaining:
            metrics.timing.estimated_completion_ms = int(elapsed_ms / finished * remaining)
        else:
            metrics.timing.estimated_completion_ms = None
