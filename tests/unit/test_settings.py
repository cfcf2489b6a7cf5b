import pytest
from pydantic import ValidationError

from transcript_analyzer.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert Settings().app_env == "dev"

    def test_default_port(self) -> None:
        assert Settings().port == 3000

    def test_default_inter_file_delay(self) -> None:
        assert Settings().inter_file_delay_seconds == 2.0

    def test_default_provider_timeout(self) -> None:
        assert Settings().provider_timeout_seconds == 120.0

    def test_default_limits(self) -> None:
        s = Settings()
        assert s.max_file_size_bytes == 10 * 1024 * 1024
        assert s.max_batch_files == 100
        assert s.min_text_length == 20

    def test_default_models(self) -> None:
        s = Settings()
        assert s.openai_default_model == "gpt-4o-mini"
        assert s.anthropic_default_model == "claude-sonnet-4-20250514"
        assert s.gemini_default_model == "gemini-2.5-flash"

    def test_reserved_retry_settings(self) -> None:
        assert Settings().max_retry_attempts == 2


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().log_level == "DEBUG"

    def test_loads_provider_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROVIDER_BACKEND", "example")
        assert Settings().provider_backend == "example"

    def test_loads_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert Settings().openai_api_key == "sk-test"


class TestMissingApiKeys:
    def test_lists_missing_keys(self) -> None:
        s = Settings(openai_api_key="o", anthropic_api_key="", gemini_api_key="")
        assert s.missing_api_keys() == ["ANTHROPIC_API_KEY", "GEMINI_API_KEY"]

    def test_empty_when_all_set(self) -> None:
        s = Settings(openai_api_key="o", anthropic_api_key="a", gemini_api_key="g")
        assert s.missing_api_keys() == []


class TestSettingsValidation:
    def test_invalid_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_delay_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INTER_FILE_DELAY_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings()
