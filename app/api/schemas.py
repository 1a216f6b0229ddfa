from __future__ import annotations

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Process liveness. `ok` says nothing about the upstream model.",
        examples=["ok"],
    )
