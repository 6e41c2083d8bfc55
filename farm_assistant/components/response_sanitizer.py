# farm_assistant/components/response_sanitizer.py
"""
Cleans free-text model output before it is shown in the chat.

    sanitize(text) -> text without emphasis markers, markdown header lines,
                      runs of 3+ newlines, or a trailing Note:/Disclaimer: block

The function is total and idempotent. `strip_emphasis` applies only the
marker removal, recursively, to structured values.
"""
import re
from typing import Any

EMPHASIS_MARKER = "*"

_HEADER_LINE_RE = re.compile(r"^#+[^\S\n]+.*$", re.MULTILINE)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_TRAILING_NOTE_RE = re.compile(r"\n(?:Note:|Disclaimer:).*\Z", re.DOTALL)


def sanitize(text: str) -> str:
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n").replace(EMPHASIS_MARKER, "")
    cleaned = _HEADER_LINE_RE.sub("", cleaned)
    cleaned = _EXCESS_NEWLINES_RE.sub("\n\n", cleaned)
    cleaned = _TRAILING_NOTE_RE.sub("", cleaned)
    return cleaned.strip()


def strip_emphasis(value: Any) -> Any:
    """Return a copy of value with every emphasis marker removed from its string leaves."""
    if isinstance(value, str):
        return value.replace(EMPHASIS_MARKER, "")
    if isinstance(value, dict):
        return {key: strip_emphasis(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [strip_emphasis(item) for item in value]
    return value


def contains_emphasis(value: Any) -> bool:
    if isinstance(value, str):
        return EMPHASIS_MARKER in value
    if isinstance(value, dict):
        return any(contains_emphasis(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(contains_emphasis(v) for v in value)
    return False
