"""
Smart-summary rewriter.

Turns free-form generator output into canonical markdown (headings, lists,
blockquotes, pipe tables). The walker visits lines by index and asks an ordered
rule table which rule owns the current line; the first rule whose predicate
matches emits markdown and advances the index by however many lines it used
(tables look ahead and consume several).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional

from .models import TableBlock
from .tables import (
    header_columns,
    is_pipe_row,
    is_separator_row,
    parse_pipe_row,
    row_columns,
    table_to_markdown,
)
from .text_utils import BULLET_PREFIX, clean_inline, normalize_key

logger = logging.getLogger(__name__)

FACTS_SECTION = "additional interesting facts"

_WRAPPER_TITLE_RE = re.compile(r"^smart\s*summary(:.*)?$", re.IGNORECASE)
_MD_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*$")
_BLOCKQUOTE_RE = re.compile(r"^>\s?(.*)$")
_NUMBERED_HEADING_RE = re.compile(r"^\d+[.)]\s+(.+)$")
_GENERIC_HEADING_RE = re.compile(r"^[A-Z][A-Za-z\s,&-]{3,60}:?$")
_RAW_BULLET_RE = re.compile(r"^[-*+]\s+(.*)$")
_KEY_LABEL_RE = re.compile(r"^(?:Key Concept|Definition|Example|Figure):", re.IGNORECASE)
_KEY_VALUE_RE = re.compile(r"^([A-Za-z][A-Za-z\s&/-]{1,40}):\s+(.+)$")
_WS_RE = re.compile(r"\s+")

_KNOWN_SECTION_TITLES = {
    "summary",
    "key insights and core concepts",
    "brain structure and functions",
    "brain parts and functions",
    "additional interesting facts",
    "conclusions",
    "summary highlights",
}

# Labels left as plain paragraphs so the HTML pass can badge them.
_BADGE_LABELS = {"key concept", "definition", "insight", "fact", "figure"}

_MAX_HEADING_WORDS = 8


class _MarkdownBuffer:
    """Collects output lines, separating blocks of different kinds with a blank line."""

    # Kinds that never share a markdown block with their neighbours.
    _STANDALONE = {"keyline", "quote"}

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.kind: Optional[str] = None

    def blank(self) -> None:
        if self.lines and self.lines[-1] != "":
            self.lines.append("")
        self.kind = None

    def add(self, kind: str, line: str) -> None:
        if self.kind is not None and (kind != self.kind or kind in self._STANDALONE):
            self.blank()
        self.lines.append(line)
        self.kind = kind

    def block(self, lines: list[str]) -> None:
        self.blank()
        self.lines.extend(lines)
        self.blank()

    def heading(self, text: str, level: int = 2) -> None:
        self.block(["#" * level + " " + text])

    def render(self) -> str:
        return "\n".join(self.lines).strip()


@dataclass
class _RewriteState:
    lines: list[str]
    index: int = 0
    section: str = ""
    out: _MarkdownBuffer = field(default_factory=_MarkdownBuffer)

    @property
    def text(self) -> str:
        return self.lines[self.index].strip()

    @property
    def cleaned(self) -> str:
        text = clean_inline(self.text)
        # Nested markup ("***a***") can need more than one pass.
        while True:
            again = clean_inline(text)
            if again == text:
                return text
            text = again

    def peek(self, offset: int = 1) -> Optional[str]:
        j = self.index + offset
        if 0 <= j < len(self.lines):
            return self.lines[j].strip()
        return None

    def open_section(self, title: str, level: int = 2) -> None:
        title = title.strip().rstrip(":").strip()
        self.out.heading(title, level)
        self.section = normalize_key(title)


class _Rule(NamedTuple):
    name: str
    matches: Callable[[_RewriteState], bool]
    emit: Callable[[_RewriteState], None]


def _collapse(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _is_bullet_text(text: str) -> bool:
    return text.startswith(BULLET_PREFIX) or bool(_RAW_BULLET_RE.match(text))


def _is_key_value(text: str) -> bool:
    return bool(_KEY_VALUE_RE.match(clean_inline(text)))


def _is_known_title(text: str) -> bool:
    return normalize_key(text) in _KNOWN_SECTION_TITLES


def _ends_table(text: Optional[str]) -> bool:
    if not text:
        return True
    return bool(
        _NUMBERED_HEADING_RE.match(text)
        or _MD_HEADING_RE.match(text)
        or _is_known_title(text)
        or _is_bullet_text(text)
        or is_pipe_row(text)
        or _is_key_value(text)
    )


def _infer_table(state: _RewriteState) -> Optional[tuple[TableBlock, int]]:
    """Return the table starting at the current line and the number of lines it spans."""
    text = state.text
    if not text or _is_bullet_text(text) or _is_key_value(text):
        return None
    headers = header_columns(text)
    if len(headers) < 2:
        return None

    first = state.peek(1)
    if _ends_table(first):
        return None
    first_row = row_columns(first, len(headers))
    if len(first_row) < 2:
        return None

    rows = [first_row]
    offset = 2
    while True:
        nxt = state.peek(offset)
        if _ends_table(nxt):
            break
        row = row_columns(nxt, len(headers))
        if len(row) < 2:
            break
        rows.append(row)
        offset += 1

    return TableBlock.from_rows(headers, rows), offset


# -- predicates -------------------------------------------------------------

def _match_blank(state: _RewriteState) -> bool:
    return not state.text


def _match_wrapper_title(state: _RewriteState) -> bool:
    title = re.sub(r"^#{1,6}\s+", "", state.cleaned)
    return bool(_WRAPPER_TITLE_RE.match(title))


def _match_markdown_heading(state: _RewriteState) -> bool:
    return bool(_MD_HEADING_RE.match(state.text))


def _match_pipe_table(state: _RewriteState) -> bool:
    return is_pipe_row(state.text)


def _match_blockquote(state: _RewriteState) -> bool:
    return bool(_BLOCKQUOTE_RE.match(state.text))


def _match_numbered_heading(state: _RewriteState) -> bool:
    return bool(_NUMBERED_HEADING_RE.match(state.cleaned))


def _match_known_title(state: _RewriteState) -> bool:
    return _is_known_title(state.text)


def _match_generic_heading(state: _RewriteState) -> bool:
    t = state.cleaned
    if not _GENERIC_HEADING_RE.match(t):
        return False
    if len(t.split()) > _MAX_HEADING_WORDS:
        return False
    if _KEY_LABEL_RE.match(t):
        return False
    # A pure-word table header ("Part  Function") belongs to the table rule.
    return _infer_table(state) is None


def _match_bullet(state: _RewriteState) -> bool:
    return _is_bullet_text(state.text) or _is_bullet_text(state.cleaned)


def _match_forced_fact(state: _RewriteState) -> bool:
    return state.section == FACTS_SECTION


def _match_table(state: _RewriteState) -> bool:
    return _infer_table(state) is not None


def _match_key_value(state: _RewriteState) -> bool:
    return _is_key_value(state.text)


def _match_any(state: _RewriteState) -> bool:
    return True


# -- emitters ---------------------------------------------------------------

def _emit_blank(state: _RewriteState) -> None:
    state.out.blank()
    state.index += 1


def _emit_nothing(state: _RewriteState) -> None:
    state.index += 1


def _emit_markdown_heading(state: _RewriteState) -> None:
    m = _MD_HEADING_RE.match(state.text)
    state.open_section(clean_inline(m.group(2)), level=len(m.group(1)))
    state.index += 1


def _emit_pipe_table(state: _RewriteState) -> None:
    block_lines: list[str] = []
    while state.index < len(state.lines) and is_pipe_row(state.text):
        block_lines.append(state.text)
        state.index += 1

    if len(block_lines) >= 2 and is_separator_row(block_lines[1]):
        headers = parse_pipe_row(block_lines[0])
        rows = [parse_pipe_row(ln) for ln in block_lines[2:] if not is_separator_row(ln)]
        state.out.block(table_to_markdown(TableBlock.from_rows(headers, rows)).split("\n"))
        return
    for ln in block_lines:
        state.out.add("para", _collapse(ln))


def _emit_blockquote(state: _RewriteState) -> None:
    inner = _BLOCKQUOTE_RE.match(state.text).group(1)
    state.out.add("quote", "> " + _collapse(inner))
    state.index += 1


def _emit_numbered_heading(state: _RewriteState) -> None:
    m = _NUMBERED_HEADING_RE.match(state.cleaned)
    state.open_section(m.group(1))
    state.index += 1


def _emit_section_heading(state: _RewriteState) -> None:
    state.open_section(state.cleaned)
    state.index += 1


def _bullet_body(text: str) -> Optional[str]:
    if text.startswith(BULLET_PREFIX):
        return text[len(BULLET_PREFIX):]
    m = _RAW_BULLET_RE.match(text)
    return m.group(1) if m else None


def _emit_bullet(state: _RewriteState) -> None:
    # Inline markup survives when the marker is visible in the source line.
    body = _bullet_body(state.text)
    if body is None:
        body = _bullet_body(state.cleaned)
    state.out.add("list", "- " + _collapse(body))
    state.index += 1


def _emit_forced_fact(state: _RewriteState) -> None:
    logger.debug("forcing list item in facts section: %r", state.text[:60])
    state.out.add("list", "- " + _collapse(state.text))
    state.index += 1


def _emit_table(state: _RewriteState) -> None:
    block, span = _infer_table(state)
    logger.debug("inferred %dx%d table at line %d", len(block.rows), block.col_count, state.index)
    state.out.block(table_to_markdown(block).split("\n"))
    state.index += span


def _emit_key_value(state: _RewriteState) -> None:
    m = _KEY_VALUE_RE.match(state.cleaned)
    label, value = _collapse(m.group(1)), m.group(2).strip()
    key = label.lower()
    if key in _BADGE_LABELS:
        state.out.add("keyline", f"{label}: {value}")
    elif key == "example":
        state.out.add("quote", f"> **Example:** {value}")
    else:
        state.out.add("list", f"- **{label}:** {value}")
    state.index += 1


def _emit_paragraph(state: _RewriteState) -> None:
    text = state.cleaned
    if text != state.text:
        # The cleaned line is what a second pass sees; let the rules claim it now.
        state.lines[state.index] = text
        rule = _select_rule(state)
        if rule.name != "paragraph":
            logger.debug("cleaned line re-classified as %s: %r", rule.name, text[:60])
            rule.emit(state)
            return
    state.out.add("para", text)
    state.index += 1


# Priority order is the contract: the first matching rule owns the line.
_RULES: tuple[_Rule, ...] = (
    _Rule("blank", _match_blank, _emit_blank),
    _Rule("wrapper_title", _match_wrapper_title, _emit_nothing),
    _Rule("markdown_heading", _match_markdown_heading, _emit_markdown_heading),
    _Rule("pipe_table", _match_pipe_table, _emit_pipe_table),
    _Rule("blockquote", _match_blockquote, _emit_blockquote),
    _Rule("numbered_heading", _match_numbered_heading, _emit_numbered_heading),
    _Rule("known_title", _match_known_title, _emit_section_heading),
    _Rule("generic_heading", _match_generic_heading, _emit_section_heading),
    _Rule("bullet", _match_bullet, _emit_bullet),
    _Rule("forced_fact", _match_forced_fact, _emit_forced_fact),
    _Rule("table", _match_table, _emit_table),
    _Rule("key_value", _match_key_value, _emit_key_value),
    _Rule("paragraph", _match_any, _emit_paragraph),
)


def _select_rule(state: _RewriteState) -> _Rule:
    for rule in _RULES:
        if rule.matches(state):
            return rule
    return _RULES[-1]


def _split_lines(value: str) -> list[str]:
    return str(value).replace("\r\n", "\n").replace("\r", "\n").split("\n")


def classify_line(lines: list[str], index: int = 0, section: str = "") -> str:
    """Name of the rule that would handle `lines[index]` inside `section`."""
    state = _RewriteState(lines=list(lines), index=index, section=normalize_key(section))
    return _select_rule(state).name


def rewrite_smart_markdown(value: str) -> str:
    """Rewrite raw smart-summary text into canonical markdown."""
    if not value:
        return ""
    state = _RewriteState(lines=_split_lines(value))
    while state.index < len(state.lines):
        _select_rule(state).emit(state)
    return state.out.render()
