from __future__ import annotations

from app.review.prompt import build_fulfillment_prompt, render_rounds
from app.review.schemas import RoundEntry


def test_single_round_renders_numbered_block() -> None:
    text = render_rounds([RoundEntry(handling="A", review="B")])
    assert text == "第1次回復內容:\nA\n第1次審查意見:\nB\n"


def test_rounds_keep_input_order_and_are_separated_by_blank_line() -> None:
    text = render_rounds(
        [
            RoundEntry(handling="first fix", review="not enough"),
            RoundEntry(handling="second fix", review="accepted"),
        ]
    )
    assert text == (
        "第1次回復內容:\nfirst fix\n第1次審查意見:\nnot enough\n"
        "\n"
        "第2次回復內容:\nsecond fix\n第2次審查意見:\naccepted\n"
    )


def test_missing_round_fields_render_as_empty_text() -> None:
    entry = RoundEntry.model_validate({"handling": None})
    assert render_rounds([entry]) == "第1次回復內容:\n\n第1次審查意見:\n\n"


def test_non_string_round_fields_are_stringified() -> None:
    entry = RoundEntry.model_validate({"handling": 42, "review": True})
    assert entry.handling == "42"
    assert entry.review == "true"


def test_prompt_embeds_content_rounds_and_json_instruction() -> None:
    prompt = build_fulfillment_prompt(
        content="原始問題 {with braces}",
        rounds=[RoundEntry(handling="A", review="B")],
    )

    assert "原始開立項目內容如下：\n原始問題 {with braces}\n" in prompt
    assert "各次回復與審查內容如下：\n第1次回復內容:\nA\n第1次審查意見:\nB\n" in prompt
    assert "請只回覆 JSON 格式，不要其他說明文字。" in prompt
    assert '"fulfill": "是"' in prompt


def test_prompt_is_deterministic() -> None:
    rounds = [RoundEntry(handling="A", review="B")]
    assert build_fulfillment_prompt(content="x", rounds=rounds) == build_fulfillment_prompt(
        content="x", rounds=rounds
    )
