from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from app.api.exception_handlers import UnhandledErrorMiddleware, register_exception_handlers
from app.api.schemas import HealthOut
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.core.settings import get_settings
from app.review.router import router as review_router

setup_logging()
logger = logging.getLogger("app.startup")


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.gemini_api_key:
            # Not fatal: /api/gemini answers 500 until a key is configured.
            logger.warning("GEMINI_API_KEY is not set; fulfillment evaluation is disabled")
        yield

    app = FastAPI(
        title="Review Fulfillment Relay",
        description=(
            "Asks a generative-language model whether the remediation rounds recorded "
            "against an issue fulfil its improvement direction.\n\n"
            "Design principles:\n"
            "- The relay only forwards and reshapes; it never fabricates a verdict.\n"
            "- One upstream call per request, no retries.\n"
            "- Every response body, including errors, is JSON.\n"
            "- Logging and metrics carry metadata only, never review text."
        ),
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "review",
                "description": "Fulfillment verdicts for remediation/review histories.",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    # Added last before CORS: its JSON 500s still pass through CORSMiddleware.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Verifies the API process is running. Does not call the upstream model, "
            "so it is free to poll."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(review_router)

    # Mounted last so API routes take precedence over same-named files.
    if settings.static_dir:
        static_dir = Path(settings.static_dir).resolve()
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
        else:
            logger.warning("STATIC_DIR does not exist; static files are not served")

    return app


app = create_app()
