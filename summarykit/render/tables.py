from __future__ import annotations

import re
from typing import Optional

from .models import TABLE_PLACEHOLDER, TableBlock
from .text_utils import clean_inline

# Upstream text extraction sometimes drops the gap between two cells
# ("CerebrumControls thinking"); a lower->Upper or digit->Upper seam marks one.
_JOINED_CELL_RE = re.compile(r"(?<=[a-z]{2})(?=[A-Z][a-z])|(?<=\d)(?=[A-Z][a-z])")
_COLUMN_GAP_RE = re.compile(r"\t+|\s{2,}")

_LEAD_KEYWORD_RE = re.compile(r"\b(?:Part|Component|Topic|Section)s?\b", re.IGNORECASE)
_TAIL_KEYWORD_RE = re.compile(
    r"\b(?:Key\s+Figures?|Functions?|Descriptions?|Roles?|Details?|Size(?:\s*/\s*Location)?|Locations?|Figures?)\b",
    re.IGNORECASE,
)
_LEAD_CELL_RE = re.compile(r"(?:[\w'&/-]+\s+){0,3}(?:Part|Component|Topic|Section)s?", re.IGNORECASE)

_TERMINAL_PUNCT_RE = re.compile(r"[.!?]$")
_LEADING_PHRASE_RE = re.compile(r"^((?:[A-Z][\w'&/-]*)(?:\s+[A-Z][\w'&/-]*)*)\s+(\S.*)$")
_TAIL_SPLIT_RES = (
    re.compile(r"^(.*?\S)\s+[-–—]\s+(\S.*)$"),
    re.compile(r"^(.*?\S);\s*(\S.*)$"),
    re.compile(r"^(.*\S),\s*([^,]+)$"),
)

_SEPARATOR_ROW_RE = re.compile(r"^\|\s*:?-{3,}.*\|$")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")


def split_columns(line: str) -> list[str]:
    """Split a whitespace-aligned line into cells, undoing glued cell seams."""
    t = (line or "").strip()
    if not t:
        return []
    t = _JOINED_CELL_RE.sub("  ", t)
    return [clean_inline(c) for c in _COLUMN_GAP_RE.split(t) if c.strip()]


def keyword_columns(line: str) -> list[str]:
    """
    Recover header cells from a single-spaced header such as
    "Brain Part Function Size/Location" using the column vocabulary.
    """
    t = clean_inline(line)
    lead = _LEAD_KEYWORD_RE.search(t)
    if not lead:
        return []
    cuts = [m.start() for m in _TAIL_KEYWORD_RE.finditer(t, lead.end())]
    if not cuts:
        return []
    bounds = [0] + cuts + [len(t)]
    cells = [t[a:b].strip() for a, b in zip(bounds, bounds[1:])]
    if not _LEAD_CELL_RE.fullmatch(cells[0]):
        return []
    # Prose mentioning "function" is not a header: tail cells must be bare keywords.
    if not all(_TAIL_KEYWORD_RE.fullmatch(c) for c in cells[1:]):
        return []
    return cells


def _is_header_like(cells: list[str]) -> bool:
    return all(len(c) <= 40 and not _TERMINAL_PUNCT_RE.search(c) for c in cells)


def header_columns(line: str) -> list[str]:
    cells = split_columns(line)
    if len(cells) < 2:
        cells = keyword_columns(line)
    if len(cells) >= 2 and _is_header_like(cells):
        return cells
    return []


def _split_tail(text: str) -> list[str]:
    for pat in _TAIL_SPLIT_RES:
        m = pat.match(text)
        if m:
            return [m.group(1).strip(), m.group(2).strip()]
    return [text]


def row_columns(line: str, expected: int) -> list[str]:
    """
    Parse a body row for a table with `expected` columns.

    Falls back to "Leading Capitalized Phrase | remainder" when the row has no
    aligned gaps, splitting the remainder once more for 3+ column tables.
    """
    cells = split_columns(line)
    if len(cells) >= 2:
        return cells
    m = _LEADING_PHRASE_RE.match(clean_inline(line))
    if not m:
        return []
    lead, rest = m.group(1).strip(), m.group(2).strip()
    if expected >= 3:
        return [lead] + _split_tail(rest)
    return [lead, rest]


def normalize_table_rows(
    rows: list[list[str]],
    col_count: Optional[int] = None,
    placeholder: str = TABLE_PLACEHOLDER,
) -> list[list[str]]:
    """Give every row the same width (the widest row unless `col_count` is set)."""
    if not rows:
        return []
    block = TableBlock.from_rows(rows[0], rows[1:], col_count=col_count, placeholder=placeholder)
    return [block.headers] + block.rows


def _escape_md_table_cell(value: str) -> str:
    cell = clean_inline(value or "")
    return cell.replace("|", r"\|")


def table_to_markdown(block: TableBlock) -> str:
    width = block.col_count
    md_lines = [
        "| " + " | ".join(_escape_md_table_cell(c) for c in block.headers) + " |",
        "| " + " | ".join(["---"] * width) + " |",
    ]
    for row in block.rows:
        md_lines.append("| " + " | ".join(_escape_md_table_cell(c) for c in row) + " |")
    return "\n".join(md_lines)


def is_pipe_row(line: str) -> bool:
    return (line or "").strip().startswith("|")


def is_separator_row(line: str) -> bool:
    return bool(_SEPARATOR_ROW_RE.match((line or "").strip()))


def parse_pipe_row(line: str) -> list[str]:
    t = (line or "").strip()
    if t.startswith("|"):
        t = t[1:]
    if t.endswith("|") and not t.endswith(r"\|"):
        t = t[:-1]
    return [clean_inline(c.replace(r"\|", "|")) for c in _CELL_SPLIT_RE.split(t)]
