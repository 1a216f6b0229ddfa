from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.review.js_compat import js_string


class RoundEntry(BaseModel):
    """One remediation/review cycle. Position in `rounds` is its 1-based index."""

    model_config = ConfigDict(extra="ignore")

    handling: str = Field(
        default="",
        description="Remediation text submitted by the responding organization.",
        examples=["已於本月完成軌道檢修並更換受損扣件。"],
    )
    review: str = Field(
        default="",
        description="Reviewer commentary on that remediation.",
        examples=["請補充檢修紀錄與照片佐證。"],
    )

    @field_validator("handling", "review", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        # Missing/null renders as empty text; other scalars as String(value) would.
        return js_string(value)


class ReviewRequest(BaseModel):
    """Validated request body of `POST /api/gemini`."""

    content: str = Field(
        min_length=1,
        description="Original issue description the remediation is judged against.",
    )
    rounds: list[RoundEntry] = Field(
        min_length=1,
        description="Remediation/review history in chronological order.",
    )


class ReviewRequestDoc(BaseModel):
    """OpenAPI-only description of the request body (validated manually)."""

    content: str = Field(max_length=20_000, examples=["月台邊緣警示帶破損，請改善。"])
    # Kept flat so the schema embeds into the route's OpenAPI entry without $defs.
    rounds: list[dict[str, str]] = Field(
        min_length=1,
        description="Rounds in chronological order, each with `handling` and `review` text.",
        examples=[[{"handling": "已更換警示帶。", "review": "請補充施工照片。"}]],
    )


class VerdictOut(BaseModel):
    """Documented shape of a successful verdict; the body is returned verbatim."""

    model_config = ConfigDict(extra="allow")

    fulfill: str | None = Field(default=None, examples=["是"])
    reason: str | None = Field(default=None, examples=["回復內容已完成改善並附佐證。"])
    error: str | None = Field(
        default=None,
        description="Present when the model reply could not be parsed as JSON.",
        examples=["AI 回覆非 JSON 格式"],
    )
    raw: Any = Field(default=None, description="Full model reply when `error` is set.")


class ErrorOut(BaseModel):
    error: str = Field(description="Human-readable error message.")
    raw: Any = Field(default=None, description="Upstream payload, for diagnosis.")
    detail: str | None = Field(default=None, description="Exception message (500 only).")
