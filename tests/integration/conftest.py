from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from transcript_analyzer.api.app import create_app
from transcript_analyzer.config.settings import Settings


@pytest.fixture()
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        provider_backend="example",
        upload_dir=str(tmp_path / "uploads"),
        inter_file_delay_seconds=0,
        provider_timeout_seconds=5,
    )


@pytest.fixture()
def make_client(test_settings: Settings) -> Generator[Callable[..., TestClient], None, None]:
    """Start the app (lifespan included) with optional stub adapters."""
    clients: list[TestClient] = []

    def _make(adapters=None) -> TestClient:
        client = TestClient(create_app(test_settings, adapters=adapters))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
