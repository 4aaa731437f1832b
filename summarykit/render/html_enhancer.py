"""
Semantic pass over the HTML rendered from smart-summary markdown.

The input is parsed once and never mutated; a fresh tree is assembled from
copies of its nodes:

- every h1/h2 opens a <section> that owns the siblings up to the next one;
- "Key Concept:", "Definition:" and "Figure:" lines become key rows
  (badge + title + detail), "Example:" lines become blockquotes;
- the "Additional Interesting Facts" section (or the part of a section under
  such a subheading) is always rendered as a list.
"""
from __future__ import annotations

import copy
import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .models import SmartKeyRow
from .smart_markdown import FACTS_SECTION
from .text_utils import normalize_key

logger = logging.getLogger(__name__)

_SECTION_HEADINGS = {"h1", "h2"}
_SUBHEADINGS = {"h3", "h4", "h5", "h6"}
_KEY_ROW_TAGS = {"p", "h3", "h4", "h5", "h6", "blockquote"}
_LIST_TAGS = {"ul", "ol"}

_KEY_LINE_RE = re.compile(r"^(Key Concept|Definition|Example|Figure):\s*", re.IGNORECASE)
# Generators sometimes glue a concept title to its explanation ("BodyThe brain").
_COLLAPSED_SEAM_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_WS_RE = re.compile(r"\s+")

_CANONICAL_LABELS = {
    "key concept": "Key Concept",
    "definition": "Definition",
    "example": "Example",
    "figure": "Figure",
}


def _element_lines(el) -> list[str]:
    if isinstance(el, NavigableString):
        text = str(el)
    else:
        clone = copy.copy(el)
        for br in clone.find_all("br"):
            br.replace_with("\n")
        text = clone.get_text()
    lines = [_WS_RE.sub(" ", ln).strip() for ln in text.split("\n")]
    return [ln for ln in lines if ln]


def _label_of(text: str) -> Optional[str]:
    m = _KEY_LINE_RE.match(text or "")
    if not m:
        return None
    return _CANONICAL_LABELS[m.group(1).lower()]


def _is_example(text: str) -> bool:
    return _label_of(text) == "Example"


def extract_key_row(text: str) -> Optional[SmartKeyRow]:
    """
    Split a "Label: title / detail" text (sub-lines separated by newlines)
    into a key row. "Example:" and unlabelled text give None.
    """
    lines = [ln.strip() for ln in (text or "").split("\n") if ln.strip()]
    if not lines:
        return None
    label = _label_of(lines[0])
    if label is None or label == "Example":
        return None

    first = _KEY_LINE_RE.sub("", lines[0], count=1).strip()
    rest = lines[1:]
    if not first and rest:
        first, rest = rest[0], rest[1:]

    title = first or None
    detail = " ".join(rest) or None
    if label == "Key Concept" and title and not detail:
        seam = _COLLAPSED_SEAM_RE.search(title)
        if seam:
            title, detail = title[: seam.start()].strip(), title[seam.start():].strip()

    return SmartKeyRow(label=f"{label}:", title=title, detail=detail)


def _key_row_tag(soup: BeautifulSoup, row: SmartKeyRow) -> Tag:
    div = soup.new_tag("div", attrs={"class": "smart-key-row", "data-label": row.kind})
    badge = soup.new_tag("span", attrs={"class": "smart-key-badge"})
    badge.string = row.label
    div.append(badge)
    if row.title:
        title = soup.new_tag("span", attrs={"class": "smart-key-title"})
        title.string = row.title
        div.append(title)
    if row.detail:
        detail = soup.new_tag("span", attrs={"class": "smart-key-detail"})
        detail.string = row.detail
        div.append(detail)
    return div


def _example_tag(soup: BeautifulSoup, lines: list[str]) -> Tag:
    body = " ".join(lines)
    body = _KEY_LINE_RE.sub("", body, count=1).strip()
    quote = soup.new_tag("blockquote", attrs={"class": "smart-example"})
    p = soup.new_tag("p")
    strong = soup.new_tag("strong")
    strong.string = "Example:"
    p.append(strong)
    if body:
        p.append(" " + body)
    quote.append(p)
    return quote


def _add_classes(tag: Tag, *names: str) -> None:
    classes = list(tag.get("class") or [])
    for name in names:
        if name not in classes:
            classes.append(name)
    tag["class"] = classes


def _is_plain_paragraph(node) -> bool:
    if not isinstance(node, Tag) or node.name != "p":
        return False
    lines = _element_lines(node)
    return bool(lines) and _label_of(lines[0]) is None


def _promote_list_items(soup: BeautifulSoup, list_tag: Tag) -> None:
    for li in list_tag.find_all("li", recursive=False):
        if li.find(["ul", "ol"]):
            continue
        paragraphs = li.find_all("p", recursive=False)
        if li.find("br"):
            lines = _element_lines(paragraphs[0] if paragraphs else li)
        elif len(paragraphs) >= 2:
            lines = _element_lines(paragraphs[0])[:1] + [" ".join(_element_lines(paragraphs[1]))]
        else:
            lines = [" ".join(_element_lines(li))]
        lines = [ln for ln in lines if ln]
        if not lines:
            continue

        if _is_example(lines[0]):
            li.clear()
            li.append(_example_tag(soup, lines))
            continue
        row = extract_key_row("\n".join(lines))
        if row is None:
            continue
        li.clear()
        _add_classes(li, "smart-key-item")
        li.append(_key_row_tag(soup, row))


def _promote_key_rows(soup: BeautifulSoup, nodes: list) -> list:
    out: list = []
    i = 0
    while i < len(nodes):
        node = nodes[i]
        i += 1
        if isinstance(node, Tag) and node.name in _LIST_TAGS:
            _promote_list_items(soup, node)
            out.append(node)
            continue
        if not (isinstance(node, Tag) and node.name in _KEY_ROW_TAGS):
            out.append(node)
            continue

        lines = _element_lines(node)
        label = _label_of(lines[0]) if lines else None
        if label is None:
            out.append(node)
            continue
        if label == "Example":
            out.append(node if node.name == "blockquote" else _example_tag(soup, lines))
            continue

        row = extract_key_row("\n".join(lines))
        if row.detail is None and i < len(nodes) and _is_plain_paragraph(nodes[i]):
            row = row.model_copy(update={"detail": " ".join(_element_lines(nodes[i]))})
            i += 1
        out.append(_key_row_tag(soup, row))
    return out


def _facts_start(heading: Optional[Tag], nodes: list) -> Optional[int]:
    """Index in `nodes` where the facts content begins, or None for other sections."""
    if heading is not None and normalize_key(heading.get_text()) == FACTS_SECTION:
        return 0
    first_tag = True
    for i, node in enumerate(nodes):
        if not isinstance(node, Tag):
            continue
        is_facts = normalize_key(node.get_text()) == FACTS_SECTION
        if first_tag and node.name == "p" and is_facts:
            return 0
        first_tag = False
        if node.name in _SUBHEADINGS:
            # Only the first subheading counts; later ones title other content.
            return i + 1 if is_facts else None
    return None


def _force_facts_list(soup: BeautifulSoup, heading: Optional[Tag], nodes: list) -> list:
    start = _facts_start(heading, nodes)
    if start is None:
        return nodes
    return nodes[:start] + _facts_list(soup, nodes[start:])


def _facts_list(soup: BeautifulSoup, nodes: list) -> list:
    lists = [n for n in nodes if isinstance(n, Tag) and n.name in _LIST_TAGS]
    if lists:
        # Page styles reset list markers; these classes switch them back on.
        for tag in lists:
            _add_classes(tag, "smart-facts-list", "list-disc" if tag.name == "ul" else "list-decimal")
        return nodes

    logger.debug("synthesizing facts list from paragraphs")
    ul = soup.new_tag("ul", attrs={"class": "smart-facts-list list-disc"})
    out: list = []
    placed = False
    first_paragraph = True
    for node in nodes:
        if not (isinstance(node, Tag) and node.name == "p"):
            out.append(node)
            continue
        lines = _element_lines(node)
        if first_paragraph and normalize_key(" ".join(lines)) == FACTS_SECTION:
            first_paragraph = False
            continue
        first_paragraph = False
        for line in lines:
            li = soup.new_tag("li")
            li.string = line
            ul.append(li)
        if not placed:
            out.append(ul)
            placed = True
    return out


def _group_sections(source: BeautifulSoup) -> list[tuple[Optional[Tag], list]]:
    groups: list[tuple[Optional[Tag], list]] = []
    for node in source.contents:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString) and not node.strip():
            continue
        if isinstance(node, Tag) and node.name in _SECTION_HEADINGS:
            groups.append((node, []))
            continue
        if not groups:
            groups.append((None, []))
        groups[-1][1].append(node)
    return groups


def enhance_html(html: str) -> str:
    """Group rendered HTML into sections and promote key lines; returns new HTML."""
    if not html or not html.strip():
        return ""
    source = BeautifulSoup(html, "html.parser")
    out = BeautifulSoup("", "html.parser")
    root = out.new_tag("div", attrs={"class": "smart-summary"})
    out.append(root)

    for heading, nodes in _group_sections(source):
        section = out.new_tag("section", attrs={"class": "smart-section"})
        if heading is not None:
            section.append(copy.copy(heading))
        body = _promote_key_rows(out, [copy.copy(n) for n in nodes])
        for node in _force_facts_list(out, heading, body):
            section.append(node)
        root.append(section)

    return str(out)
