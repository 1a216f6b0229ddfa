from __future__ import annotations

from app.core.llm.gemini_client import GeminiClient, GeminiConfig
from app.core.settings import get_settings


def get_gemini_client() -> GeminiClient | None:
    """
    Dependency provider for GeminiClient.

    Returns None when no API key is configured. The relay turns that into a
    configuration error only after the request body has been validated.
    """

    settings = get_settings()
    if not settings.gemini_api_key:
        return None

    config = GeminiConfig(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        model=settings.gemini_model,
        timeout_seconds=float(settings.gemini_timeout_seconds),
    )
    return GeminiClient(config=config)
