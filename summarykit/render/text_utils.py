from __future__ import annotations

import re

BULLET = "•"
BULLET_PREFIX = BULLET + " "

_BR_TAG_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BOLD_STAR_RE = re.compile(r"\*\*(.*?)\*\*")
_BOLD_UNDERSCORE_RE = re.compile(r"__(.*?)__")
_CODE_RE = re.compile(r"`([^`]+)`")
# Single-marker emphasis only when it hugs a word, so "a * b" and snake_case survive.
_ITALIC_STAR_RE = re.compile(r"(?<![\w*])\*(?![\s*])([^*\n]+?)(?<![\s*])\*(?![\w*])")
_ITALIC_UNDERSCORE_RE = re.compile(r"(?<![\w_])_(?![\s_])([^_\n]+?)(?<![\s_])_(?![\w_])")
_WS_RE = re.compile(r"\s+")

_HEADING_OR_QUOTE_RE = re.compile(r"^(?:#{1,6}(?:\s+|$)|>(?:\s+|$))")
# Decimal outline (1.1.), single ordered (1.), markdown unordered, or the glyph itself.
_LIST_MARKER_RE = re.compile(r"^(?:\d+(?:\.\d+)+\.|\d+\.|[-*+]|" + BULLET + r")\s+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def clean_inline(value: str) -> str:
    """Strip inline markdown noise from a single line and collapse whitespace."""
    if not value:
        return ""
    s = _BR_TAG_RE.sub("\n", value)
    s = _BOLD_STAR_RE.sub(r"\1", s)
    s = _BOLD_UNDERSCORE_RE.sub(r"\1", s)
    s = _CODE_RE.sub(r"\1", s)
    s = _ITALIC_STAR_RE.sub(r"\1", s)
    s = _ITALIC_UNDERSCORE_RE.sub(r"\1", s)
    s = _WS_RE.sub(" ", s)
    return s.strip()


def split_list_marker(line: str) -> tuple[bool, str]:
    """
    Return (had_marker, text) for a line with any list prefix removed.

    Leading whitespace is ignored; only the first marker is consumed.
    """
    t = (line or "").lstrip()
    m = _LIST_MARKER_RE.match(t)
    if not m:
        return False, t
    return True, t[m.end():]


def normalize_list_marker(line: str) -> str:
    """Rewrite one line's list prefix (1., 1.1., -, *, +) to the canonical glyph."""
    had_marker, text = split_list_marker(line)
    if not had_marker:
        return (line or "").strip()
    return BULLET_PREFIX + text.strip()


def _normalize_line(line: str) -> str:
    text = clean_inline(line)
    bulleted = False
    prev = None
    # Every step only shortens the line, so this converges; iterating makes
    # nested prefixes ("> - **1. x**") resolve in a single pass.
    while text != prev:
        prev = text
        text = _HEADING_OR_QUOTE_RE.sub("", text, count=1)
        had_marker, text = split_list_marker(text)
        bulleted = bulleted or had_marker
        text = clean_inline(text)
    if bulleted and text:
        return BULLET_PREFIX + text
    return text


def collapse_blank_lines(text: str) -> str:
    return _BLANK_RUN_RE.sub("\n\n", text or "")


def normalize_general(value: str) -> str:
    """
    Whole-document pass: plain text, one line per logical line, with a single
    bullet convention and no heading or blockquote markers.

    Idempotent; `None` and empty input give "".
    """
    if not value:
        return ""
    text = str(value).replace("\r\n", "\n").replace("\r", "\n")
    # Break <br>-joined cells into their own lines before anything else.
    text = _BR_TAG_RE.sub("\n", text)
    lines = [_normalize_line(ln) for ln in text.split("\n")]
    return collapse_blank_lines("\n".join(lines)).strip()


def is_bullet_line(line: str) -> bool:
    return (line or "").lstrip().startswith(BULLET_PREFIX)


def normalize_key(text: str) -> str:
    """Lower-case, colon-free, single-spaced form used for vocabulary lookups."""
    t = clean_inline(text or "").strip().rstrip(":").strip()
    return _WS_RE.sub(" ", t).lower()
