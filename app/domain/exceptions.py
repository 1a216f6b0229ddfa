from __future__ import annotations

from typing import Any


class RelayError(Exception):
    """Base for failures of the review relay; each maps to one HTTP response."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidInputError(RelayError):
    """Raised when the review payload is missing fields or out of bounds."""

    status_code = 400


class ConfigurationError(RelayError):
    """Raised when the server lacks configuration needed to serve the request."""

    status_code = 500


class UpstreamShapeError(RelayError):
    """The upstream answered successfully but without the expected text field."""

    status_code = 502

    def __init__(self, message: str, *, raw: Any):
        super().__init__(message)
        self.raw = raw

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message, "raw": self.raw}


class UpstreamCallError(RelayError):
    """
    The upstream call itself failed.

    With an HTTP response (`upstream_status` set) this is a bad gateway carrying the
    upstream error body; without one (DNS, refused connection, timeout) it is a 500.
    """

    def __init__(self, message: str, *, upstream_status: int | None = None, raw: Any = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.raw = raw
        self.status_code = 502 if upstream_status is not None else 500

    def to_content(self) -> dict[str, Any]:
        if self.upstream_status is None:
            return {"error": self.message}
        return {"error": self.message, "raw": self.raw}
