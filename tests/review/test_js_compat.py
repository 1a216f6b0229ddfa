from __future__ import annotations

import pytest

from app.review.js_compat import js_string, loads_strict, utf16_length


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (3.0, "3"),
        (1.5, "1.5"),
    ],
)
def test_js_string_matches_javascript_string(value, expected: str) -> None:
    assert js_string(value) == expected


def test_utf16_length_counts_surrogate_pairs() -> None:
    assert utf16_length("abc") == 3
    assert utf16_length("審查") == 2
    assert utf16_length("\U00020000") == 2
    assert utf16_length("😀a") == 3


@pytest.mark.parametrize("document", ["NaN", "[Infinity]", '{"a": -Infinity}'])
def test_loads_strict_rejects_non_finite_constants(document: str) -> None:
    with pytest.raises(ValueError):
        loads_strict(document)


def test_loads_strict_accepts_plain_json() -> None:
    assert loads_strict(b'{"a": [1, 2.5, "x", null, true]}') == {"a": [1, 2.5, "x", None, True]}
