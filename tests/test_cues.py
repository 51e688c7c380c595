"""Tests for caption file parsing."""

import json

import pytest

from segmento.errors import InvalidFormatError, UnsupportedExtensionError
from segmento.interfaces.segment import Cue
from segmento.steps.cues import parse_cues, parse_json_cues, parse_text_cues


def test_parse_json_cues_keeps_source_order() -> None:
    text = json.dumps(
        [
            {"tiempo_ms": 5000, "texto": "Later"},
            {"tiempo_ms": 1000, "texto": "Earlier"},
        ]
    )
    parsed = parse_json_cues(text)
    assert parsed.cues == [Cue(5000, "Later"), Cue(1000, "Earlier")]
    assert parsed.warnings == []


def test_parse_json_cues_accepts_english_keys() -> None:
    parsed = parse_json_cues('[{"timestamp_ms": 250.5, "text": "Hi"}]')
    assert parsed.cues == [Cue(250.5, "Hi")]


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"tiempo_ms": 0, "texto": "x"}',
        "[]",
        '[{"tiempo_ms": 0, "texto": "ok"}, 3]',
        '[{"tiempo_ms": "100", "texto": "x"}]',
        '[{"tiempo_ms": true, "texto": "x"}]',
        '[{"tiempo_ms": 100, "texto": "   "}]',
        '[{"texto": "missing timestamp"}]',
        '[{"tiempo_ms": NaN, "texto": "x"}]',
        '[{"tiempo_ms": Infinity, "texto": "x"}]',
        '[{"tiempo_ms": -500, "texto": "x"}]',
    ],
)
def test_parse_json_cues_rejects_bad_input(text: str) -> None:
    with pytest.raises(InvalidFormatError):
        parse_json_cues(text)


def test_parse_text_cues_skips_bad_lines_with_warnings() -> None:
    text = "0|Hello\nabc|bad\n\n2000|World\n3000|\nno delimiter\n"
    parsed = parse_text_cues(text)
    assert parsed.cues == [Cue(0, "Hello"), Cue(2000, "World")]
    assert len(parsed.warnings) == 3
    assert parsed.warnings[0].startswith("Line 2 skipped")
    assert parsed.warnings[1].startswith("Line 5 skipped")
    assert parsed.warnings[2].startswith("Line 6 skipped")


def test_parse_text_cues_keeps_delimiters_inside_text() -> None:
    parsed = parse_text_cues("100|a|b")
    assert parsed.cues == [Cue(100, "a|b")]


def test_parse_text_cues_skips_non_ascii_digits() -> None:
    parsed = parse_text_cues("\u00b2|bad\n\u0663\u0660|arabic\n0|ok")
    assert parsed.cues == [Cue(0, "ok")]
    assert [w.split(":")[0] for w in parsed.warnings] == ["Line 1 skipped", "Line 2 skipped"]


def test_parse_text_cues_requires_one_valid_line() -> None:
    with pytest.raises(InvalidFormatError):
        parse_text_cues("junk\n-5|negative\n")


def test_parse_cues_dispatches_on_extension() -> None:
    assert parse_cues("CAPTIONS.JSON", '[{"tiempo_ms": 0, "texto": "a"}]').cues == [Cue(0, "a")]
    assert parse_cues("captions.txt", "0|a").cues == [Cue(0, "a")]


def test_parse_cues_rejects_unknown_extension() -> None:
    with pytest.raises(UnsupportedExtensionError):
        parse_cues("captions.srt", "1\n00:00:00,000 --> 00:00:01,000\nhi")
