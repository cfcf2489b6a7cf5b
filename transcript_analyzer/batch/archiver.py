import io
import zipfile
from pathlib import PurePath

from transcript_analyzer.batch.models import MultiModelResults
from transcript_analyzer.providers.models import ProviderName


def archive_filename(batch_id: str) -> str:
    return f"transcript-results-{batch_id}.zip"


def entry_name(filename: str, provider: ProviderName) -> str:
    """Build ``<provider>/<stem>-<provider>.txt`` for one analysis."""
    name = PurePath(filename).name
    stem = name[: -len(".txt")] if name.endswith(".txt") else name
    return f"{provider.value}/{stem}-{provider.value}.txt"


class ResultArchiver:
    """Packs analysis texts into a ZIP archive grouped by provider.

    Only the generated text is written; metadata and timestamps are left out.
    A provider with no result for a file contributes no entry.
    """

    def __init__(self, compresslevel: int = 9) -> None:
        self._compresslevel = compresslevel

    def entries(self, results: MultiModelResults) -> list[tuple[str, str]]:
        """Return ``(entry name, analysis text)`` pairs in archive order."""
        pairs: list[tuple[str, str]] = []
        for provider in ProviderName:
            for file in results.files:
                result = file.results.get(provider)
                if result is not None:
                    pairs.append((entry_name(file.filename, provider), result.analysis))
        return pairs

    def build(self, results: MultiModelResults) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(
            buffer,
            mode="w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self._compresslevel,
        ) as archive:
            for name, text in self.entries(results):
                archive.writestr(name, text)
        return buffer.getvalue()
