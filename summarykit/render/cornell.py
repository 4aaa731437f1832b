from __future__ import annotations

import re
from typing import Optional

from .text_utils import BULLET_PREFIX, clean_inline, collapse_blank_lines, normalize_general

_SEPARATOR_ROW_RE = re.compile(r"^\|\s*:?-{3,}.*\|$")
_CELL_JOINER = " — "

CUES_PLACEHOLDER = "No cues available."
NOTES_PLACEHOLDER = "No notes available."
SUMMARY_PLACEHOLDER = "No summary available."


def _is_pipe_row(line: str) -> bool:
    return line.startswith("|") and line.endswith("|")


def normalize_cornell(value: str) -> str:
    """
    Flatten pipe-delimited pseudo-tables into the bullet convention.

    Text without any pipe row comes back exactly as `normalize_general` returns it.
    """
    if not value:
        return ""

    # Rows are looked for in the general form (<br> split, markers and inline
    # markup gone) so none can surface only on a second pass.
    normalized = normalize_general(value)
    lines = [ln.strip() for ln in normalized.split("\n")]
    lines = [ln for ln in lines if ln]

    if not any(_is_pipe_row(ln) for ln in lines):
        return normalized

    out: list[str] = []
    for line in lines:
        if _SEPARATOR_ROW_RE.match(line):
            continue

        if _is_pipe_row(line):
            cells = [clean_inline(c) for c in line[1:-1].split("|")]
            cells = [c for c in cells if c]
            if not cells:
                continue
            out.append(BULLET_PREFIX + cells[0])
            if len(cells) > 1:
                out.append("  " + _CELL_JOINER.join(cells[1:]))
            continue

        out.append(line)

    return normalize_general(collapse_blank_lines("\n".join(out)).strip())


def compose_cornell_text(
    cues: Optional[str],
    notes: Optional[str],
    summary: Optional[str],
    *,
    for_copy: bool = False,
) -> str:
    """Join the three Cornell fields into one document for export or copying."""
    if for_copy:
        return f"[CUES]\n{cues or ''}\n\n[NOTES]\n{notes or ''}\n\n[SUMMARY]\n{summary or ''}".strip()

    return (
        f"CUES\n{normalize_cornell(cues or '') or CUES_PLACEHOLDER}\n\n"
        f"NOTES\n{normalize_cornell(notes or '') or NOTES_PLACEHOLDER}\n\n"
        f"SUMMARY\n{normalize_cornell(summary or '') or SUMMARY_PLACEHOLDER}"
    )
