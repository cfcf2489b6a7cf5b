import asyncio

from transcript_analyzer.batch.exceptions import FileReadError
from transcript_analyzer.batch.models import UploadedTranscript


class FileLoader:
    """Reads uploaded transcript text from disk."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def load(self, transcript: UploadedTranscript) -> str:
        """Read the whole transcript into memory.

        Raises:
            FileReadError: if the file is missing, unreadable or not valid text.
        """
        try:
            return await asyncio.to_thread(
                transcript.path.read_text, encoding=self._encoding
            )
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(
                f"Failed to read transcript '{transcript.original_name}': {exc}"
            ) from exc
