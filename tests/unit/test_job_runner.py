import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from transcript_analyzer.batch.models import BatchStatus
from transcript_analyzer.batch.registry import BatchRegistry
from transcript_analyzer.batch.tracker import BatchTracker
from transcript_analyzer.worker.job_runner import BatchJobRunner


def _make_runner() -> tuple[BatchJobRunner, MagicMock]:
    tracker = MagicMock(spec=BatchTracker)
    tracker.start_processing = AsyncMock()
    return BatchJobRunner(tracker), tracker


class TestRun:
    @pytest.mark.asyncio
    async def test_calls_tracker(self) -> None:
        runner, tracker = _make_runner()

        await runner.run("b-1")

        tracker.start_processing.assert_awaited_once_with("b-1")

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self) -> None:
        runner, tracker = _make_runner()
        tracker.start_processing.side_effect = RuntimeError("boom")

        await runner.run("b-1")  # Should not raise


class TestLaunch:
    @pytest.mark.asyncio
    async def test_runs_in_background_and_forgets_finished_task(self) -> None:
        runner, tracker = _make_runner()

        task = runner.launch("b-1")
        assert runner.active_batch_ids == ["b-1"]
        await task
        await asyncio.sleep(0)

        tracker.start_processing.assert_awaited_once_with("b-1")
        assert runner.active_batch_ids == []

    @pytest.mark.asyncio
    async def test_failed_task_does_not_propagate(self) -> None:
        runner, tracker = _make_runner()
        tracker.start_processing.side_effect = RuntimeError("boom")

        result = await runner.launch("b-1")

        assert result is None


class TestShutdown:
    @pytest.mark.asyncio
    async def test_cancelled_batch_is_marked_failed(
        self, make_adapters, write_transcripts, job_config
    ) -> None:
        registry = BatchRegistry()
        tracker = BatchTracker(registry, make_adapters(delay=10), inter_file_delay_seconds=0)
        runner = BatchJobRunner(tracker)
        batch_id = await tracker.create_batch(write_transcripts("a.txt"), job_config)

        runner.launch(batch_id)
        await asyncio.sleep(0.01)
        assert registry.get(batch_id).status is BatchStatus.PROCESSING

        await runner.shutdown()

        assert registry.get(batch_id).status is BatchStatus.FAILED
        assert runner.active_batch_ids == []

    @pytest.mark.asyncio
    async def test_noop_without_tasks(self) -> None:
        runner, _tracker = _make_runner()
        await runner.shutdown()
