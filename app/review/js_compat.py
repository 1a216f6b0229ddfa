"""JavaScript-compatible JSON decoding and text rules.

The relay's contract (length limits, accepted JSON, how scalars render into the
prompt) was defined by a JavaScript front end and server, so these helpers follow
`JSON.parse`, `String(x)` and `String.prototype.length` rather than Python's defaults.
"""

from __future__ import annotations

import json
import math
from typing import Any


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON.
    raise ValueError(f"invalid JSON constant: {name}")


def _parse_number(literal: str) -> float | None:
    # Overflowing literals (1e999) become Infinity in JS and serialize back as null.
    value = float(literal)
    return value if math.isfinite(value) else None


def loads_strict(data: str | bytes) -> Any:
    """`json.loads` restricted to what `JSON.parse` accepts; raises ValueError otherwise."""

    return json.loads(data, parse_constant=_reject_constant, parse_float=_parse_number)


def js_string(value: Any) -> str:
    """Render a JSON scalar the way `String(value)` would."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units; characters outside the BMP count twice."""

    return len(text.encode("utf-16-le")) // 2
