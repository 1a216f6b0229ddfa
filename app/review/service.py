from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import ValidationError

from app.core.llm.gemini_client import (
    GeminiHTTPStatusError,
    GeminiResponseShapeError,
    GeminiTransportError,
)
from app.domain.exceptions import (
    ConfigurationError,
    InvalidInputError,
    UpstreamCallError,
    UpstreamShapeError,
)
from app.review.js_compat import js_string, utf16_length
from app.review.prompt import build_fulfillment_prompt
from app.review.reply_parser import parse_verdict
from app.review.schemas import ReviewRequest

MISSING_FIELDS_MESSAGE = "content 與 rounds 欄位不可為空且 rounds 必須為陣列且至少有一筆"
MISSING_API_KEY_MESSAGE = "Server 未設定 API key"
CONTENT_TOO_LONG_MESSAGE = "content 太長"
UPSTREAM_SHAPE_MESSAGE = "API 格式異常"


class TextGenerationClient(Protocol):
    async def generate_text(self, *, prompt: str) -> str: ...


@dataclass(frozen=True)
class RelayConfig:
    max_content_chars: int = 20_000


def _parse_review_request(payload: Any) -> ReviewRequest:
    """Check presence and shape of `content`/`rounds`; anything off is one error."""

    if not isinstance(payload, dict):
        raise InvalidInputError(MISSING_FIELDS_MESSAGE)

    content = payload.get("content")
    rounds = payload.get("rounds")
    # Truthy scalars are accepted as their String() text; objects and arrays are not.
    if isinstance(content, (bool, int, float)) and content:
        content = js_string(content)
    if not isinstance(content, str) or not content:
        raise InvalidInputError(MISSING_FIELDS_MESSAGE)
    if not isinstance(rounds, list) or not rounds:
        raise InvalidInputError(MISSING_FIELDS_MESSAGE)
    if not all(isinstance(r, dict) for r in rounds):
        raise InvalidInputError(MISSING_FIELDS_MESSAGE)

    try:
        return ReviewRequest.model_validate({"content": content, "rounds": rounds})
    except ValidationError as exc:
        raise InvalidInputError(MISSING_FIELDS_MESSAGE) from exc


class FulfillmentRelay:
    """
    Ask the upstream model whether a remediation history fulfils an issue.

    The relay only forwards and reshapes: if the reply cannot be read, the caller
    gets an error object, never a guessed verdict.
    """

    def __init__(self, *, client: TextGenerationClient | None, config: RelayConfig):
        self._client = client
        self._config = config

    async def evaluate_fulfillment(self, payload: Any) -> dict[str, Any]:
        request = _parse_review_request(payload)

        if self._client is None:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)
        if utf16_length(request.content) > self._config.max_content_chars:
            raise InvalidInputError(CONTENT_TOO_LONG_MESSAGE)

        prompt = build_fulfillment_prompt(content=request.content, rounds=request.rounds)

        try:
            reply = await self._client.generate_text(prompt=prompt)
        except GeminiHTTPStatusError as exc:
            raise UpstreamCallError(
                f"Google API {exc.status_code}",
                upstream_status=exc.status_code,
                raw=exc.body,
            ) from exc
        except GeminiTransportError as exc:
            raise UpstreamCallError(str(exc)) from exc
        except GeminiResponseShapeError as exc:
            raise UpstreamShapeError(UPSTREAM_SHAPE_MESSAGE, raw=exc.raw) from exc

        return parse_verdict(reply)
