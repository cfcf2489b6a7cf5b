from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000
    upload_dir: str = "uploads"

    # "live" talks to the vendor APIs, "example" uses offline adapters.
    provider_backend: str = "live"

    openai_api_key: str = ""
    openai_default_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 4000

    anthropic_api_key: str = ""
    anthropic_default_model: str = "claude-sonnet-4-20250514"
    anthropic_max_tokens: int = 4000

    gemini_api_key: str = ""
    gemini_default_model: str = "gemini-2.5-flash"
    gemini_max_tokens: int = 4000

    inter_file_delay_seconds: float = 2.0
    provider_timeout_seconds: float = 120.0

    # Reserved: no retry logic consults these.
    max_retry_attempts: int = 2
    retry_delay_seconds: float = 1.0

    max_file_size_bytes: int = 10 * 1024 * 1024
    max_batch_files: int = 100
    min_text_length: int = 20

    def missing_api_keys(self) -> list[str]:
        """Return the names of required provider keys that are not set."""
        keys = {
            "OPENAI_API_KEY": self.openai_api_key,
            "ANTHROPIC_API_KEY": self.anthropic_api_key,
            "GEMINI_API_KEY": self.gemini_api_key,
        }
        return [name for name, value in keys.items() if not value]
