from __future__ import annotations

from collections.abc import Sequence

from app.review.schemas import RoundEntry

_FULFILLMENT_TEMPLATE = """
請根據「原始開立的項目內容」及各次「鐵路機構回復內容」和「審查意見內容」，綜合判斷回復是否符合改善方向。
請只回覆 JSON 格式，不要其他說明文字。
{{
  "fulfill": "是",
  "reason": "..."
}}
原始開立項目內容如下：
{content}

各次回復與審查內容如下：
{rounds_text}
"""


def render_rounds(rounds: Sequence[RoundEntry]) -> str:
    """
    Render the remediation history as numbered blocks, oldest first.

    Each block ends with a newline and blocks are joined by one more, so rounds
    are separated by a blank line.
    """

    blocks = [
        f"第{i}次回復內容:\n{r.handling}\n第{i}次審查意見:\n{r.review}\n"
        for i, r in enumerate(rounds, start=1)
    ]
    return "\n".join(blocks)


def build_fulfillment_prompt(*, content: str, rounds: Sequence[RoundEntry]) -> str:
    """
    Create the single user turn sent upstream.

    The instructions ask for a judgement based only on the supplied text and for a
    bare JSON object `{"fulfill": "是"|"否", "reason": "..."}` with no prose. The model
    may still wrap it; `parse_verdict` copes with that.
    """

    return _FULFILLMENT_TEMPLATE.format(content=content, rounds_text=render_rounds(rounds))
