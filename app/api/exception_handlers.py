from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.domain.exceptions import RelayError


def internal_error_response(exc: Exception) -> JSONResponse:
    # Only the message leaves the process; the stack trace stays in the logs.
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "detail": str(exc)},
    )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn any exception that escaped the routes into a JSON 500.

    Must be added inside CORSMiddleware; Starlette's own server-error handler sits
    outside every user middleware and its responses carry no CORS headers.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001 - logged by HttpLoggingMiddleware further in
            return internal_error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers.

    Every error path renders a JSON object with an `error` key; clients never see
    an HTML error page or a stack trace. Relay failures are logged by the route that
    raised them, not here.
    """

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
