from __future__ import annotations

import re

from .models import BulletItem, Section
from .text_utils import clean_inline, is_bullet_line, normalize_general, normalize_key, split_list_marker

DEFAULT_SECTION_TITLE = "Overview"
FALLBACK_SECTION_TITLE = "Summary"

_KNOWN_HEADINGS = {
    "overview",
    "summary",
    "key insights",
    "core structures",
    "interesting facts",
    "brain structure and functions",
    "key insights and core concepts",
}

_COLON_HEADING_RE = re.compile(r"^(.{3,80}):$")
_TERMINAL_PUNCT_RE = re.compile(r"[.!?]$")
_LETTER_RE = re.compile(r"[^\W\d_]")

_CHILD_LABEL_RE = re.compile(
    r"^(?:definition|function|role|examples?|details?|description|size/location|location"
    r"|primary functions?|key figure/detail|key figure|figure)\s*:",
    re.IGNORECASE,
)


def is_known_heading(line: str) -> bool:
    return normalize_key(line) in _KNOWN_HEADINGS


def looks_like_heading(line: str, max_chars: int = 80) -> bool:
    t = (line or "").strip()
    if not t or is_bullet_line(t):
        return False
    if len(t) > max_chars:
        return False
    if _TERMINAL_PUNCT_RE.search(t):
        return False
    return bool(_LETTER_RE.search(t))


def split_sections(value: str) -> list[Section]:
    """
    Partition normalized text into ordered titled sections.

    Heading detection, first match wins: known vocabulary, then an explicit
    "Title:" line, then the generic heading shape. A heading-shaped line only
    closes a section that already has content, so runs of short lines never
    produce empty sections. At least one section is always returned.
    """
    text = normalize_general(value)
    sections: list[Section] = []
    title = DEFAULT_SECTION_TITLE
    body: list[str] = []

    def flush() -> None:
        joined = "\n".join(body).strip()
        if joined:
            sections.append(Section(title=title, body=joined))
        body.clear()

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        if is_known_heading(line):
            flush()
            title = line.rstrip(":").strip()
            continue

        m = None if is_bullet_line(line) else _COLON_HEADING_RE.match(line)
        if m:
            flush()
            title = m.group(1).strip()
            continue

        if looks_like_heading(line) and body:
            flush()
            title = line
            continue

        body.append(line)

    flush()

    if not sections:
        return [Section(title=FALLBACK_SECTION_TITLE, body=text)]
    return sections


def _indent_width(line: str) -> int:
    expanded = line.replace("\t", "    ")
    return len(expanded) - len(expanded.lstrip(" "))


def parse_hierarchy(body: str) -> list[BulletItem]:
    """
    Group indented or label-prefixed lines ("Definition:", "Example:" ...)
    under the preceding top-level bullet.
    """
    items: list[tuple[str, list[str]]] = []
    for raw_line in (body or "").replace("\r\n", "\n").split("\n"):
        if not raw_line.strip():
            continue
        _, text = split_list_marker(raw_line)
        text = clean_inline(text)
        if not text:
            continue

        is_child = _indent_width(raw_line) >= 2 or bool(_CHILD_LABEL_RE.match(text))
        # The first line always opens an item, so a child never lacks a parent.
        if is_child and items:
            items[-1][1].append(text)
            continue
        items.append((text, []))

    return [BulletItem(text=text, children=children) for text, children in items]
