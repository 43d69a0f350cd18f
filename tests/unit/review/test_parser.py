"""Tests for stage reply parsing."""

import json

from tailorloop.review.parser import EMPTY_FEEDBACK, parse_stage_reply


def test_plain_text_falls_back_to_single_concern_pair():
    parsed = parse_stage_reply("not json at all")

    assert parsed.strategy == "fallback"
    assert parsed.result.status == "concern"
    assert [p.model_dump() for p in parsed.result.pairs] == [
        {
            "jd": "",
            "resume": "not json at all",
            "verdict": "concern",
            "reason": "not json at all",
        }
    ]


def test_empty_reply_uses_placeholder():
    parsed = parse_stage_reply("")
    assert parsed.result.pairs[0].reason == EMPTY_FEEDBACK


def test_pairs_payload_in_code_fence():
    payload = {
        "status": "pass",
        "pairs": [
            {"jd": "Python", "resume": "5 years", "verdict": "pass", "reason": "match"},
            {"jd": "Go", "resume": "missing", "verdict": "concern", "reason": "absent"},
        ],
        "prompt": "Add Go.",
    }

    parsed = parse_stage_reply(f"```json\n{json.dumps(payload)}\n```")

    assert parsed.strategy == "pairs"
    assert parsed.result.status == "concern"
    assert len(parsed.result.pairs) == 2
    assert parsed.result.fix_prompt == "Add Go."


def test_string_items_in_pairs_use_stage_status():
    parsed = parse_stage_reply(json.dumps({"status": "pass", "pairs": ["fine", ""]}))
    assert parsed.result.status == "pass"
    assert len(parsed.result.pairs) == 1
    assert parsed.result.pairs[0].resume == "fine"


def test_bullets_payload():
    parsed = parse_stage_reply(json.dumps({"status": "concern", "bullets": ["a", "b"]}))
    assert parsed.strategy == "bullets"
    assert [p.reason for p in parsed.result.pairs] == ["a", "b"]
    assert all(p.verdict == "concern" for p in parsed.result.pairs)


def test_bare_object_payload():
    text = json.dumps({"status": "pass"})
    parsed = parse_stage_reply(text)
    assert parsed.strategy == "bare_object"
    assert parsed.result.status == "pass"
    assert parsed.result.pairs[0].resume == text


def test_null_prompt_becomes_empty():
    parsed = parse_stage_reply(json.dumps({"status": "pass", "pairs": [], "prompt": None}))
    assert parsed.result.fix_prompt == ""


def test_json_array_uses_fallback():
    parsed = parse_stage_reply("[1, 2]")
    assert parsed.strategy == "fallback"
    assert parsed.result.pairs[0].resume == "[1, 2]"
