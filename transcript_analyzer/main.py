import uvicorn

from transcript_analyzer.api.app import create_app
from transcript_analyzer.config.settings import Settings
from transcript_analyzer.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> validate keys -> serve the API."""
    settings = Settings()
    Log.configure(settings.log_level)

    if settings.provider_backend.lower() == "live":
        missing = settings.missing_api_keys()
        if missing:
            Log.error(
                "Configuration errors: " + ", ".join(f"{key} required" for key in missing)
            )
            raise SystemExit(1)
    Log.info(
        f"Configuration validated: max {settings.max_batch_files} files per batch, "
        f"max {settings.max_file_size_bytes // (1024 * 1024)}MB per file"
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
