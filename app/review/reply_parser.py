from __future__ import annotations

import re
from typing import Any

from app.core.metrics import record_fulfillment_reply
from app.review.js_compat import loads_strict

REPLY_NOT_JSON = "AI 回覆非 JSON 格式"
REPLY_INVALID_JSON = "解析 AI 回覆 JSON 失敗"

# Greedy: first "{" through last "}", across newlines. Unrelated braces in
# surrounding prose widen the span and make the parse fail; that is accepted.
_BRACED_SPAN_RE = re.compile(r"\{[\s\S]*\}")


def parse_verdict(text: str) -> dict[str, Any]:
    """
    Turn the model's reply text into a verdict mapping.

    - No braces at all -> `{"error": REPLY_NOT_JSON, "raw": text}`.
    - Braced span that is not valid JSON -> `{"error": REPLY_INVALID_JSON, "raw": text}`.
      NaN/Infinity count as invalid, as they do for `JSON.parse`.
    - Otherwise the decoded object, untouched. `fulfill`/`reason` are not checked.
    """

    matched = _BRACED_SPAN_RE.search(text)
    if matched is None:
        record_fulfillment_reply("not_json")
        return {"error": REPLY_NOT_JSON, "raw": text}

    try:
        parsed = loads_strict(matched.group(0))
    except ValueError:
        record_fulfillment_reply("invalid_json")
        return {"error": REPLY_INVALID_JSON, "raw": text}

    record_fulfillment_reply("verdict")
    return parsed
