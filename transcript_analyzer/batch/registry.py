from collections.abc import Iterator

from transcript_analyzer.batch.models import Batch


class BatchRegistry:
    """In-memory store of every batch, keyed by id.

    One instance lives for the whole process and is handed to whoever needs
    it. Nothing is persisted.
    """

    def __init__(self) -> None:
        self._batches: dict[str, Batch] = {}

    def add(self, batch: Batch) -> None:
        self._batches[batch.id] = batch

    def get(self, batch_id: str) -> Batch | None:
        return self._batches.get(batch_id)

    def remove(self, batch_id: str) -> Batch | None:
        return self._batches.pop(batch_id, None)

    def all(self) -> list[Batch]:
        """Batches in creation order."""
        return list(self._batches.values())

    def clear(self) -> None:
        self._batches.clear()

    def __contains__(self, batch_id: object) -> bool:
        return batch_id in self._batches

    def __len__(self) -> int:
        return len(self._batches)

    def __iter__(self) -> Iterator[Batch]:
        return iter(self.all())
