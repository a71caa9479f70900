"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Missing third-party keys disable the feature; they never block startup

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - CORS_ORIGINS and ALLOWED_ORIGINS both accepted: mobile and web clients were configured separately
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Server
    environment: str = "development"
    port: int = 5001
    app_version: str = "1.0.0"

    # Database
    database_url: str = (
        "postgresql+asyncpg://translator:translator@db:5432/translator"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_max_retries: int = 3
    gemini_timeout_seconds: int = 60
    gemini_base_delay_ms: int = 1000
    gemini_max_delay_ms: int = 30_000

    # Speechmatics
    speechmatics_api_key: str = ""
    speechmatics_url: str = "https://asr.api.speechmatics.com/v2"
    speechmatics_rt_key_url: str = "https://mp.speechmatics.com/v1/api_keys?type=rt"
    speechmatics_poll_interval_seconds: float = 2.0
    speechmatics_max_polls: int = 90

    # Google Translate / TTS (keyless public endpoints)
    google_translate_url: str = "https://translate.googleapis.com/translate_a/single"
    google_tts_url: str = "https://translate.google.com/translate_tts"
    http_timeout_seconds: int = 30

    # Firebase
    firebase_project_id: str = ""
    firebase_service_account_key: str = ""

    # Clerk
    clerk_secret_key: str = ""
    clerk_webhook_secret: str = ""
    clerk_api_url: str = "https://api.clerk.com/v1"

    # API
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8081",
        "http://localhost:19006",
    ]
    allowed_origins: list[str] = []
    cors_origin_regex: str = r"https://.*\.(ngrok-free\.app|ngrok\.io)"

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_window_ms: int = 15 * 60 * 1000
    rate_limit_max_requests: int = 100

    # Uploads
    max_file_size: int = 10 * 1024 * 1024
    max_document_size: int = 20 * 1024 * 1024
    max_documents: int = 10
    max_request_size: int = 50 * 1024 * 1024

    # Master data
    seed_master_data: bool = True

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def all_cors_origins(self) -> list[str]:
        return list(dict.fromkeys([*self.cors_origins, *self.allowed_origins]))


@lru_cache
def get_settings() -> Settings:
    return Settings()
