import pytest

from farm_assistant.components.response_sanitizer import contains_emphasis, sanitize, strip_emphasis

samples = [
    "",
    "plain answer",
    "**Bold** and *italic* text",
    "# Heading\nBody line\n## Sub\nMore",
    "Line one\n\n\n\n\nLine two",
    "Answer text.\nNote: consult an agronomist.\nMore note text",
    "Answer\nDisclaimer: not professional advice",
    "\r\n\r\n  ***  \r\n# x\r\nkeep me\r\n\r\n\r\n\r\nNote: gone",
    "#hashtag stays because no space follows",
]


@pytest.mark.parametrize("text", samples)
def test_sanitize_is_idempotent(text):
    once = sanitize(text)
    assert sanitize(once) == once


@pytest.mark.parametrize("text", samples)
def test_sanitize_leaves_no_emphasis_markers(text):
    assert "*" not in sanitize(text)


def test_sanitize_empty_string():
    assert sanitize("") == ""


def test_sanitize_removes_header_lines():
    assert sanitize("# Title\nUse mulch.\n### Tips\nWater early.") == "Use mulch.\n\nWater early."


def test_sanitize_collapses_blank_runs():
    assert sanitize("a\n\n\n\nb") == "a\n\nb"


def test_sanitize_drops_trailing_note_block():
    text = "Rotate your crops yearly.\nNote: results vary.\nAsk locally."
    assert sanitize(text) == "Rotate your crops yearly."


def test_sanitize_keeps_note_mid_line():
    assert sanitize("Take Note: this stays") == "Take Note: this stays"


def test_strip_emphasis_is_recursive_and_copies():
    value = {"a": "*x*", "b": ["**y**", {"c": "z*"}], "n": 3}
    cleaned = strip_emphasis(value)
    assert cleaned == {"a": "x", "b": ["y", {"c": "z"}], "n": 3}
    assert value["a"] == "*x*"
    assert not contains_emphasis(cleaned)
    assert contains_emphasis(value)
