from __future__ import annotations

import time
from typing import Literal, cast

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.middleware.http_logging import safe_route_label

metrics_router = APIRouter(tags=["monitoring"])

GeminiOutcome = Literal["ok", "http_error", "transport_error", "malformed"]
ReplyOutcome = Literal["verdict", "not_json", "invalid_json"]

# Labels are fixed vocabularies or route templates only; never review text.

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status_code"),
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("method", "route", "status_code"),
    # Model generation routinely takes tens of seconds; keep the upper buckets wide.
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 180.0),
)

gemini_requests_total = Counter(
    "gemini_requests_total",
    "Outbound Gemini generateContent calls by outcome",
    labelnames=("outcome",),
)

fulfillment_replies_total = Counter(
    "fulfillment_replies_total",
    "Parsed model replies by outcome",
    labelnames=("outcome",),
)


def record_gemini_request(outcome: GeminiOutcome) -> None:
    gemini_requests_total.labels(outcome=outcome).inc()


def record_fulfillment_reply(outcome: ReplyOutcome) -> None:
    fulfillment_replies_total.labels(outcome=outcome).inc()


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route_label = safe_route_label(request)
            method = request.method
            code = str(int(status_code))
            duration = time.perf_counter() - started
            http_requests_total.labels(method=method, route=route_label, status_code=code).inc()
            http_request_duration_seconds.labels(
                method=method, route=route_label, status_code=code
            ).observe(duration)


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    payload = generate_latest()
    return Response(content=cast(bytes, payload), media_type=CONTENT_TYPE_LATEST)
