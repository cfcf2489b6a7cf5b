import time
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, File, Form, Request, Response, UploadFile

from transcript_analyzer.api.serializers import progress_to_dict, summary_to_dict
from transcript_analyzer.api.uploads import UploadStore
from transcript_analyzer.api.validation import build_job_config, select_transcripts
from transcript_analyzer.batch.archiver import ResultArchiver, archive_filename
from transcript_analyzer.batch.tracker import BatchTracker
from transcript_analyzer.config.settings import Settings
from transcript_analyzer.logging.logger import Log
from transcript_analyzer.worker.job_runner import BatchJobRunner

VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["transcripts"])
health_router = APIRouter(tags=["health"])


class BatchOperationError(Exception):
    """Raised when a cancel or delete request cannot be honoured."""


def _tracker(request: Request) -> BatchTracker:
    return request.app.state.tracker


def _ok(data: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "data": data}


def _uptime_seconds(request: Request) -> int:
    return round(time.monotonic() - request.app.state.started_monotonic)


@router.post("/process")
async def process_transcripts(
    request: Request,
    transcripts: list[UploadFile] | None = File(None),
    job_description: str | None = Form(None, alias="jobDescription"),
    prompt: str | None = Form(None),
    openai_model: str | None = Form(None, alias="openaiModel"),
    claude_model: str | None = Form(None, alias="claudeModel"),
    gemini_model: str | None = Form(None, alias="geminiModel"),
) -> dict[str, Any]:
    """Validate a submission, create its batch and start processing in the background."""
    settings: Settings = request.app.state.settings
    store: UploadStore = request.app.state.upload_store
    runner: BatchJobRunner = request.app.state.runner

    uploads = select_transcripts(transcripts, settings)
    job_config = build_job_config(
        job_description=job_description,
        prompt=prompt,
        openai_model=openai_model,
        claude_model=claude_model,
        gemini_model=gemini_model,
        settings=settings,
    )
    Log.info(
        f"Starting transcript processing: {len(uploads)} file(s), models "
        + ", ".join(f"{name.value}={model}" for name, model in job_config.models.items())
    )

    stored = await store.save_all(uploads)
    try:
        batch_id = await _tracker(request).create_batch(stored, job_config)
    finally:
        store.discard(stored)
    runner.launch(batch_id)

    return _ok(
        {
            "batchId": batch_id,
            "totalFiles": len(stored),
            "status": "processing",
            "message": f"Processing {len(stored)} transcript file(s) with multiple AI models",
        }
    )


@router.get("/batch/{batch_id}/progress")
async def get_batch_progress(batch_id: uuid.UUID, request: Request) -> dict[str, Any]:
    progress = _tracker(request).get_progress(str(batch_id))
    return _ok(progress_to_dict(progress))


@router.get("/batch/{batch_id}/download")
async def download_results(batch_id: uuid.UUID, request: Request) -> Response:
    """Return every available analysis as a ZIP archive."""
    results = _tracker(request).get_results(str(batch_id))
    archiver: ResultArchiver = request.app.state.archiver
    filename = archive_filename(results.batch_id)
    content = archiver.build(results)
    Log.info(f"Generated results zip: {filename}")
    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/batch/{batch_id}/cancel")
async def cancel_batch(batch_id: uuid.UUID, request: Request) -> dict[str, Any]:
    if not _tracker(request).cancel_batch(str(batch_id)):
        raise BatchOperationError("Cannot cancel batch (not found or already finished)")
    return _ok({"batchId": str(batch_id), "status": "cancelled"})


@router.delete("/batch/{batch_id}")
async def delete_batch(batch_id: uuid.UUID, request: Request) -> dict[str, Any]:
    if not _tracker(request).delete_batch(str(batch_id)):
        raise BatchOperationError("Cannot delete batch (not found or still processing)")
    return _ok({"batchId": str(batch_id), "message": "Batch deleted successfully"})


@router.get("/batches")
async def list_batches(request: Request) -> dict[str, Any]:
    summaries = [summary_to_dict(s) for s in _tracker(request).list_batches()]
    return _ok({"batches": summaries, "total": len(summaries)})


@router.get("/health")
async def system_health(request: Request) -> dict[str, Any]:
    stats = _tracker(request).health()
    return _ok(
        {
            "system": {"uptime": _uptime_seconds(request), "status": "healthy"},
            "batches": stats["batches"],
            "processing": {
                "totalFilesProcessed": stats["processing"]["total_files_processed"],
                "totalFilesFailed": stats["processing"]["total_files_failed"],
            },
        }
    )


@health_router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "uptime": _uptime_seconds(request),
    }
