"""Checks applied to a submission before any batch is created."""

from pathlib import PurePath

from fastapi import UploadFile

from transcript_analyzer.batch.models import JobConfig
from transcript_analyzer.config.settings import Settings
from transcript_analyzer.providers.models import ProviderName


class SubmissionError(Exception):
    """Raised when a submission is rejected at ingress."""


def is_transcript(upload: UploadFile) -> bool:
    """Accept plain-text uploads by MIME type or ``.txt`` extension."""
    filename = upload.filename or ""
    return upload.content_type == "text/plain" or filename.lower().endswith(".txt")


def select_transcripts(files: list[UploadFile] | None, settings: Settings) -> list[UploadFile]:
    """Return the uploads, rejecting the submission if any is not a transcript."""
    if not files:
        raise SubmissionError("No files uploaded")
    if len(files) > settings.max_batch_files:
        raise SubmissionError(
            f"Too many files. Maximum {settings.max_batch_files} files per batch"
        )
    if not all(is_transcript(f) for f in files):
        raise SubmissionError("Only TXT files are allowed")
    return list(files)


def build_job_config(
    *,
    job_description: str | None,
    prompt: str | None,
    openai_model: str | None,
    claude_model: str | None,
    gemini_model: str | None,
    settings: Settings,
) -> JobConfig:
    """Validate the text fields and build a JobConfig from trimmed values."""
    min_length = settings.min_text_length
    job_description = (job_description or "").strip()
    prompt = (prompt or "").strip()
    if len(job_description) < min_length:
        raise SubmissionError(f"Job description must be at least {min_length} characters")
    if len(prompt) < min_length:
        raise SubmissionError(f"Prompt must be at least {min_length} characters")

    models = {
        ProviderName.OPENAI: (openai_model or "").strip(),
        ProviderName.CLAUDE: (claude_model or "").strip(),
        ProviderName.GEMINI: (gemini_model or "").strip(),
    }
    if not all(models.values()):
        raise SubmissionError(
            "All model names are required (openaiModel, claudeModel, geminiModel)"
        )
    return JobConfig(job_description=job_description, prompt=prompt, models=models)


def display_name(upload: UploadFile) -> str:
    """Original filename without any client-supplied directory part."""
    return PurePath(upload.filename or "transcript.txt").name
