import asyncio

from transcript_analyzer.batch.tracker import BatchTracker
from transcript_analyzer.logging.logger import Log


class BatchJobRunner:
    """Run batch processing in detached tasks and log their failures.

    The submitter never awaits these tasks. Their outcome is visible only
    through the batch status kept by the tracker.
    """

    def __init__(self, tracker: BatchTracker) -> None:
        self._tracker = tracker
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def launch(self, batch_id: str) -> asyncio.Task[None]:
        """Start processing a batch in the background. Requires a running loop."""
        task = asyncio.create_task(self.run(batch_id), name=f"batch-{batch_id}")
        self._tasks[batch_id] = task
        task.add_done_callback(lambda t: self._forget(batch_id, t))
        return task

    def _forget(self, batch_id: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(batch_id) is task:
            del self._tasks[batch_id]

    async def run(self, batch_id: str) -> None:
        """Process one batch, logging instead of raising on failure."""
        Log.info(f"Running batch {batch_id}")
        try:
            await self._tracker.start_processing(batch_id)
        except asyncio.CancelledError:
            Log.warning(f"Batch {batch_id} processing cancelled")
            raise
        except Exception as exc:
            Log.error(f"Error processing batch {batch_id}: {exc}")

    @property
    def active_batch_ids(self) -> list[str]:
        return list(self._tasks)

    async def shutdown(self) -> None:
        """Cancel every running batch task and wait for it to unwind."""
        tasks = list(self._tasks.values())
        if not tasks:
            return
        Log.info(f"Cancelling {len(tasks)} running batch task(s)")
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
