from __future__ import annotations

import re

from .models import PdfContentBlock, PdfTableBlock, PdfTextBlock
from .tables import is_pipe_row, is_separator_row, parse_pipe_row
from .text_utils import BULLET_PREFIX, clean_inline

EMPTY_PLACEHOLDER = "No content available."

_HEADING_MARK_RE = re.compile(r"^#{1,6}\s+")
_QUOTE_MARK_RE = re.compile(r"^>\s?")
_BULLET_MARK_RE = re.compile(r"^(?:[-*+•]|\d+\.)\s+")


def _text_line(line: str) -> str:
    t = line.strip()
    if not t:
        return ""
    t = _HEADING_MARK_RE.sub("", t)
    t = _QUOTE_MARK_RE.sub("", t)
    m = _BULLET_MARK_RE.match(t)
    if m:
        return BULLET_PREFIX + clean_inline(t[m.end():])
    return clean_inline(t)


def extract_pdf_blocks(markdown: str) -> list[PdfContentBlock]:
    """
    Split markdown into text and table blocks in source order.

    A pipe row directly followed by a separator row opens a table that runs
    until the first non-pipe line. Everything else is buffered as text.
    """
    if not markdown:
        return []
    lines = str(markdown).replace("\r\n", "\n").split("\n")
    blocks: list[PdfContentBlock] = []
    buffer: list[str] = []

    def flush() -> None:
        text = "\n".join(buffer).strip()
        # Keep paragraph gaps but never more than one blank line in a row.
        text = re.sub(r"\n{3,}", "\n\n", text)
        if text:
            blocks.append(PdfTextBlock(text=text))
        buffer.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        nxt = lines[i + 1] if i + 1 < len(lines) else ""
        if is_pipe_row(line) and is_separator_row(nxt):
            flush()
            headers = parse_pipe_row(line)
            rows: list[list[str]] = []
            i += 2
            while i < len(lines) and is_pipe_row(lines[i]):
                if not is_separator_row(lines[i]):
                    rows.append(parse_pipe_row(lines[i]))
                i += 1
            blocks.append(PdfTableBlock.from_rows(headers, rows, col_count=len(headers)))
            continue
        buffer.append(_text_line(line))
        i += 1

    flush()
    return blocks


def blocks_or_placeholder(blocks: list[PdfContentBlock], placeholder: str = EMPTY_PLACEHOLDER) -> list[PdfContentBlock]:
    if blocks:
        return blocks
    return [PdfTextBlock(text=placeholder)]
