from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from app.core.metrics import record_gemini_request


class GeminiError(Exception):
    """Base error for Gemini client failures."""


class GeminiHTTPStatusError(GeminiError):
    """Gemini answered with a non-2xx status; `body` holds its error payload."""

    def __init__(self, *, status_code: int, body: Any):
        super().__init__(f"Gemini API returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class GeminiTransportError(GeminiError):
    """No HTTP response was obtained (connection failure, timeout, ...)."""


class GeminiResponseShapeError(GeminiError):
    """A 2xx reply did not carry candidate text where expected."""

    def __init__(self, *, raw: Any):
        super().__init__("Gemini response did not contain candidate text")
        self.raw = raw


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str
    base_url: str
    model: str
    timeout_seconds: float


@dataclass(frozen=True)
class CandidateText:
    text: str


@dataclass(frozen=True)
class MalformedResponse:
    raw: Any


def extract_candidate_text(body: Any) -> CandidateText | MalformedResponse:
    """
    Pull `candidates[0].content.parts[0].text` out of a generateContent reply.

    Every hop is checked explicitly. An empty string counts as missing, since an
    empty generation can never hold a verdict.
    """

    if not isinstance(body, dict):
        return MalformedResponse(raw=body)
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return MalformedResponse(raw=body)
    first = candidates[0]
    if not isinstance(first, dict):
        return MalformedResponse(raw=body)
    content = first.get("content")
    if not isinstance(content, dict):
        return MalformedResponse(raw=body)
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return MalformedResponse(raw=body)
    text = parts[0].get("text")
    if not isinstance(text, str) or not text:
        return MalformedResponse(raw=body)
    return CandidateText(text=text)


def _response_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _transport_message(exc: httpx.HTTPError) -> str:
    message = str(exc)
    if message:
        return message
    if isinstance(exc, httpx.TimeoutException):
        return "Gemini request timed out"
    return type(exc).__name__


class GeminiClient:
    """
    Minimal client for the Gemini `generateContent` REST endpoint.

    Design notes:
    - No logging in this module (prompts/outputs may be sensitive).
    - Exactly one attempt per call. Generation is billed, so nothing is retried.
    - The API key travels in the `x-goog-api-key` header, never in the URL.
    """

    def __init__(
        self,
        *,
        config: GeminiConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    async def generate_text(self, *, prompt: str) -> str:
        url = (
            f"{self._config.base_url.rstrip('/')}/models/"
            f"{self._config.model}:generateContent"
        )
        headers = {
            "x-goog-api-key": self._config.api_key,
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            record_gemini_request("transport_error")
            raise GeminiTransportError(_transport_message(exc)) from exc

        if not resp.is_success:
            record_gemini_request("http_error")
            raise GeminiHTTPStatusError(status_code=resp.status_code, body=_response_body(resp))

        extracted = extract_candidate_text(_response_body(resp))
        if isinstance(extracted, MalformedResponse):
            record_gemini_request("malformed")
            raise GeminiResponseShapeError(raw=extracted.raw)

        record_gemini_request("ok")
        return extracted.text
