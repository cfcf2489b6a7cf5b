import pytest

from transcript_analyzer.batch.exceptions import BatchStateError
from transcript_analyzer.batch.models import (
    BatchMetrics,
    BatchStatus,
    FileRecord,
    FileStatus,
)
from transcript_analyzer.providers.models import ProviderName, ProviderResult


def _result(text: str = "analysis") -> ProviderResult:
    return ProviderResult(model="m", filename="a.txt", analysis=text)


class TestStatusTerminality:
    @pytest.mark.parametrize(
        "status, terminal",
        [
            (BatchStatus.CREATED, False),
            (BatchStatus.PROCESSING, False),
            (BatchStatus.COMPLETED, True),
            (BatchStatus.FAILED, True),
            (BatchStatus.CANCELLED, True),
        ],
    )
    def test_batch_status(self, status: BatchStatus, terminal: bool) -> None:
        assert status.is_terminal is terminal


class TestFileRecord:
    def test_defaults(self) -> None:
        record = FileRecord(filename="a.txt", content="hello")
        assert record.status is FileStatus.PENDING
        assert record.results == {}
        assert record.retry_count == 0
        assert record.id

    def test_set_result_stores_once(self) -> None:
        record = FileRecord(filename="a.txt", content="hello")
        record.set_result(ProviderName.CLAUDE, _result("first"))

        with pytest.raises(BatchStateError, match="claude"):
            record.set_result(ProviderName.CLAUDE, _result("second"))
        assert record.results[ProviderName.CLAUDE].analysis == "first"


class TestBatchMetrics:
    def test_initial_counts_everything_pending(self) -> None:
        metrics = BatchMetrics.initial(4)
        assert metrics.total == metrics.pending == 4
        assert metrics.processing == metrics.completed == metrics.failed == 0
        assert metrics.provider_complete == {name: 0 for name in ProviderName}

    def test_copy_is_independent(self) -> None:
        metrics = BatchMetrics.initial(2)
        snapshot = metrics.copy()

        metrics.pending -= 1
        metrics.provider_complete[ProviderName.OPENAI] += 1
        metrics.timing.elapsed_ms = 500

        assert snapshot.pending == 2
        assert snapshot.provider_complete[ProviderName.OPENAI] == 0
        assert snapshot.timing.elapsed_ms == 0
