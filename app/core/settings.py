from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # HTTP server
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
        description="Interface the uvicorn server binds to.",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="Port the uvicorn server listens on.",
    )
    allowed_origins: str = Field(
        default="*",
        validation_alias=AliasChoices("ALLOWED_ORIGINS", "allowed_origins"),
        description="Comma-separated CORS origin allowlist. `*` permits any origin.",
    )
    static_dir: str | None = Field(
        default=None,
        validation_alias=AliasChoices("STATIC_DIR", "static_dir"),
        description="Optional directory served at `/` (front-end assets).",
    )
    max_request_body_bytes: int = Field(
        default=200 * 1024,
        ge=1024,
        validation_alias=AliasChoices("MAX_REQUEST_BODY_BYTES", "max_request_body_bytes"),
        description="Upper bound for raw JSON request bodies (bytes).",
    )

    # Review relay
    review_max_content_chars: int = Field(
        default=20_000,
        ge=1,
        validation_alias=AliasChoices("REVIEW_MAX_CONTENT_CHARS", "review_max_content_chars"),
        description="Maximum length of `content`; keeps upstream cost bounded.",
    )

    # LLM integration (Gemini)
    # The key is a credential: never log it and never put it in URLs.
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "gemini_api_key"),
        description="Google Gemini API key (required for /api/gemini).",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        validation_alias=AliasChoices("GEMINI_MODEL", "gemini_model"),
        description="Gemini model identifier used for verdict generation.",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias=AliasChoices("GEMINI_BASE_URL", "gemini_base_url"),
        description="Base URL for the Gemini REST API (override for proxies/emulators).",
    )
    gemini_timeout_seconds: float = Field(
        default=180.0,
        ge=1.0,
        validation_alias=AliasChoices("GEMINI_TIMEOUT_SECONDS", "gemini_timeout_seconds"),
        description="Timeout for Gemini API requests (seconds). Generation can be slow.",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        if not origins or "*" in origins:
            return ["*"]
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
