import time
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from transcript_analyzer.api.routes import VERSION, BatchOperationError, health_router, router
from transcript_analyzer.api.uploads import UploadStore
from transcript_analyzer.api.validation import SubmissionError
from transcript_analyzer.batch.archiver import ResultArchiver
from transcript_analyzer.batch.exceptions import BatchNotFoundError, FileReadError
from transcript_analyzer.batch.registry import BatchRegistry
from transcript_analyzer.batch.tracker import BatchTracker
from transcript_analyzer.config.settings import Settings
from transcript_analyzer.logging.logger import Log
from transcript_analyzer.providers.base import BaseProviderAdapter
from transcript_analyzer.providers.factory import ProviderFactory
from transcript_analyzer.providers.models import ProviderName
from transcript_analyzer.worker.job_runner import BatchJobRunner


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **extra,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain exceptions into ``{"success": false, ...}`` responses."""

    @app.exception_handler(SubmissionError)
    async def _submission_error(_request: Request, exc: SubmissionError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(BatchOperationError)
    async def _operation_error(_request: Request, exc: BatchOperationError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(BatchNotFoundError)
    async def _not_found(_request: Request, _exc: BatchNotFoundError) -> JSONResponse:
        return _error(404, "Batch not found")

    @app.exception_handler(FileReadError)
    async def _file_read_error(_request: Request, exc: FileReadError) -> JSONResponse:
        Log.error(f"Batch creation aborted: {exc}")
        return _error(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        Log.warning(f"Validation failed: {exc.errors()}")
        return _error(400, "Validation failed", details=jsonable_errors(exc))

    @app.exception_handler(Exception)
    async def _unexpected(_request: Request, exc: Exception) -> JSONResponse:
        Log.exception(f"Server error: {exc}")
        return _error(500, "Internal server error")


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def create_app(
    settings: Settings | None = None,
    adapters: Mapping[ProviderName, BaseProviderAdapter] | None = None,
) -> FastAPI:
    """Build the application. State is created in the lifespan and torn down with it."""
    settings = settings if settings is not None else Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        registry = BatchRegistry()
        tracker = BatchTracker(
            registry,
            adapters if adapters is not None else ProviderFactory.create_all(settings),
            inter_file_delay_seconds=settings.inter_file_delay_seconds,
            provider_timeout_seconds=settings.provider_timeout_seconds or None,
        )
        runner = BatchJobRunner(tracker)
        upload_store = UploadStore(Path(settings.upload_dir), settings.max_file_size_bytes)

        app.state.settings = settings
        app.state.registry = registry
        app.state.tracker = tracker
        app.state.runner = runner
        app.state.upload_store = upload_store
        app.state.archiver = ResultArchiver()
        app.state.started_monotonic = time.monotonic()

        Log.info(f"Transcript analyzer {VERSION} started ({settings.provider_backend} providers)")
        for name, model in ProviderFactory.default_models(settings).items():
            Log.info(f"  {name.value}: default model {model}")
        try:
            yield
        finally:
            Log.info("Shutting down, cleaning up")
            await runner.shutdown()
            registry.clear()
            removed = upload_store.cleanup()
            Log.info(f"Removed {removed} stored upload(s)")

    app = FastAPI(title="Transcript Analyzer", version=VERSION, lifespan=lifespan)
    app.include_router(router)
    app.include_router(health_router)
    register_exception_handlers(app)
    return app
