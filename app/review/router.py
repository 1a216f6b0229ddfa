from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.llm.deps import get_gemini_client
from app.core.settings import get_settings
from app.domain.exceptions import RelayError
from app.review.js_compat import loads_strict
from app.review.schemas import ErrorOut, ReviewRequestDoc, VerdictOut
from app.review.service import FulfillmentRelay, RelayConfig

router = APIRouter(prefix="/api", tags=["review"])
logger = logging.getLogger("app.review_fulfillment")


def get_fulfillment_relay(gemini_client=Depends(get_gemini_client)) -> FulfillmentRelay:
    settings = get_settings()
    return FulfillmentRelay(
        client=gemini_client,
        config=RelayConfig(max_content_chars=int(settings.review_max_content_chars)),
    )


def _payload_too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail="request entity too large",
    )


async def _read_json_body(request: Request) -> Any:
    """
    Read the raw body with a size cap and decode it.

    The cap is enforced while streaming, so an oversized upload is cut off at the
    limit instead of being buffered first. Undecodable bodies yield None so they fail
    validation like a missing `content`.
    """

    max_bytes = get_settings().max_request_body_bytes
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > max_bytes:
        raise _payload_too_large()

    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > max_bytes:
            raise _payload_too_large()
        chunks.append(chunk)

    body = b"".join(chunks)
    if not body:
        return None
    try:
        return loads_strict(body)
    except ValueError:
        return None


@router.post(
    "/gemini",
    # The model's object is returned verbatim; a response model would reshape it.
    response_model=None,
    summary="Judge whether remediation rounds fulfil an issue",
    description=(
        "Builds a prompt from the issue `content` and each remediation/review round, asks "
        "Gemini for a `{fulfill, reason}` verdict and returns the parsed object verbatim.\n\n"
        "A reply the model did not format as JSON still returns 200, with an `error` and "
        "the full `raw` reply in place of the verdict."
    ),
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": ReviewRequestDoc.model_json_schema()},
            },
        }
    },
    responses={
        200: {"model": VerdictOut, "description": "Verdict, or an embedded reply-parse error."},
        400: {"model": ErrorOut, "description": "Missing/invalid fields or content too long."},
        413: {"model": ErrorOut, "description": "Request body too large."},
        500: {"model": ErrorOut, "description": "Missing API key or upstream unreachable."},
        502: {"model": ErrorOut, "description": "Upstream error status or malformed reply."},
    },
)
async def evaluate_fulfillment_route(
    request: Request,
    relay: FulfillmentRelay = Depends(get_fulfillment_relay),
) -> dict[str, Any]:
    """
    IMPORTANT: review text, prompts and model replies are never logged.
    """

    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    payload = await _read_json_body(request)
    rounds = payload.get("rounds") if isinstance(payload, dict) else None
    round_count = len(rounds) if isinstance(rounds, list) else None

    try:
        result = await relay.evaluate_fulfillment(payload)
    except RelayError as exc:
        logger.info(
            "Fulfillment evaluation failed",
            extra={
                "request_id": request_id,
                "rounds": round_count,
                "status_code": exc.status_code,
                "error": type(exc).__name__,
                "upstream_status": getattr(exc, "upstream_status", None),
                "success": False,
            },
        )
        raise

    logger.info(
        "Fulfillment evaluated",
        extra={
            "request_id": request_id,
            "rounds": round_count,
            # A 200 can still carry an unparseable model reply.
            "success": "error" not in result,
        },
    )
    return result
