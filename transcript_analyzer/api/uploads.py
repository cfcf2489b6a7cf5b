import asyncio
import uuid
from pathlib import Path, PurePath

from fastapi import UploadFile

from transcript_analyzer.api.validation import SubmissionError, display_name
from transcript_analyzer.batch.models import UploadedTranscript
from transcript_analyzer.logging.logger import Log


class UploadStore:
    """Stores uploaded transcripts on disk until their batch has read them."""

    def __init__(self, upload_dir: Path, max_file_size_bytes: int) -> None:
        self._upload_dir = upload_dir
        self._max_file_size_bytes = max_file_size_bytes

    async def save(self, upload: UploadFile) -> UploadedTranscript:
        """Write one upload under a unique name.

        Raises:
            SubmissionError: if the file exceeds the size limit.
        """
        original_name = display_name(upload)
        data = await upload.read(self._max_file_size_bytes + 1)
        if len(data) > self._max_file_size_bytes:
            limit_mb = self._max_file_size_bytes // (1024 * 1024)
            raise SubmissionError(f"File too large. Maximum {limit_mb}MB per file")

        path = self._upload_dir / self._unique_name(original_name)
        await asyncio.to_thread(self._write, path, data)
        Log.debug(f"Stored upload {original_name} ({len(data)} bytes)")
        return UploadedTranscript(
            original_name=original_name,
            path=path,
            size_bytes=len(data),
        )

    async def save_all(self, uploads: list[UploadFile]) -> list[UploadedTranscript]:
        saved: list[UploadedTranscript] = []
        try:
            for upload in uploads:
                saved.append(await self.save(upload))
        except Exception:
            self.discard(saved)
            raise
        return saved

    def discard(self, transcripts: list[UploadedTranscript]) -> None:
        """Remove stored files once their content is no longer needed."""
        for transcript in transcripts:
            transcript.path.unlink(missing_ok=True)

    def cleanup(self) -> int:
        """Delete every file left in the upload directory."""
        if not self._upload_dir.is_dir():
            return 0
        removed = 0
        for path in self._upload_dir.iterdir():
            if not path.is_file():
                continue
            try:
                path.unlink()
                removed += 1
            except OSError as exc:
                Log.warning(f"Could not clean up {path.name}: {exc}")
        return removed

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _unique_name(original_name: str) -> str:
        name = PurePath(original_name)
        return f"{name.stem}-{uuid.uuid4().hex}{name.suffix}"
