import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from transcript_analyzer.batch.models import JobConfig, UploadedTranscript
from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.exceptions import ProviderNetworkError
from transcript_analyzer.providers.models import ProviderName, ProviderResult, ResultMetadata

JOB_DESCRIPTION = "Please analyze this customer support call transcript for sentiment"
PROMPT = "Summarize the key issues raised by the customer"


class StubAdapter(BaseProviderAdapter):
    """Records calls and fails for the filenames it is told to."""

    def __init__(
        self,
        provider: ProviderName,
        *,
        fail_on: set[str] | None = None,
        events: list[tuple[str, ProviderName, str]] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.provider = provider
        self.fail_on = fail_on or set()
        self.events = events if events is not None else []
        self.delay = delay
        self.calls: list[dict[str, str]] = []

    async def analyze(
        self,
        *,
        transcript: str,
        prompt: str,
        model: str,
        filename: str,
    ) -> ProviderResult:
        self.calls.append(
            {"transcript": transcript, "prompt": prompt, "model": model, "filename": filename}
        )
        self.events.append(("start", self.provider, filename))
        if self.delay:
            await asyncio.sleep(self.delay)
        self.events.append(("end", self.provider, filename))
        if filename in self.fail_on:
            raise ProviderNetworkError(f"{self.provider.value} quota exceeded")
        return ProviderResult(
            model=model,
            filename=filename,
            analysis=f"{self.provider.value} analysis of {filename}",
            metadata=ResultMetadata(tokens=42, processing_time_ms=5),
        )


@pytest.fixture()
def job_config() -> JobConfig:
    return JobConfig(
        job_description=JOB_DESCRIPTION,
        prompt=PROMPT,
        models={
            ProviderName.OPENAI: "gpt-4o-mini",
            ProviderName.CLAUDE: "claude-sonnet-4-20250514",
            ProviderName.GEMINI: "gemini-2.5-flash",
        },
    )


@pytest.fixture()
def write_transcripts(tmp_path: Path) -> Callable[..., list[UploadedTranscript]]:
    """Write transcripts to disk and describe them as ingress would."""

    def _write(*names: str) -> list[UploadedTranscript]:
        transcripts = []
        for name in names:
            path = tmp_path / f"stored-{name}"
            text = f"Agent: Hello, this is {name}.\nCustomer: My order never arrived."
            path.write_text(text, encoding="utf-8")
            transcripts.append(
                UploadedTranscript(original_name=name, path=path, size_bytes=len(text))
            )
        return transcripts

    return _write


@pytest.fixture()
def make_adapters() -> Callable[..., dict[ProviderName, StubAdapter]]:
    """Build one StubAdapter per provider.

    ``fail_on`` maps a provider to the filenames it fails for.
    """

    def _make(
        fail_on: dict[ProviderName, set[str]] | None = None,
        events: list[tuple[str, ProviderName, str]] | None = None,
        delay: float = 0.0,
    ) -> dict[ProviderName, StubAdapter]:
        fail_on = fail_on or {}
        shared_events = events if events is not None else []
        return {
            name: StubAdapter(
                name,
                fail_on=fail_on.get(name),
                events=shared_events,
                delay=delay,
            )
            for name in ProviderName
        }

    return _make
