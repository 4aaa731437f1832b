from __future__ import annotations

import html
import logging
import re
from typing import Callable, Optional

from ..config import RenderSettings
from .cornell import (
    CUES_PLACEHOLDER,
    NOTES_PLACEHOLDER,
    SUMMARY_PLACEHOLDER,
    compose_cornell_text,
    normalize_cornell,
)
from .engines import render_markdown, sanitize_html
from .html_enhancer import enhance_html
from .models import BulletItem, PdfContentBlock, PdfTextBlock, Section, SummaryDocument, SummaryFormat
from .pdf_blocks import blocks_or_placeholder, extract_pdf_blocks
from .pdf_export import render_pdf
from .sections import FALLBACK_SECTION_TITLE, parse_hierarchy, split_sections
from .smart_markdown import rewrite_smart_markdown
from .text_utils import normalize_general

logger = logging.getLogger(__name__)

_FILE_NAME_BAD_CHARS_RE = re.compile(r'[\\/:*?"<>|]')


def sanitize_file_name(value: str) -> str:
    name = _FILE_NAME_BAD_CHARS_RE.sub("", value or "")
    name = re.sub(r"\s+", " ", name).strip()[:120]
    return name or "summary"


def _raw_html(value: str) -> str:
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", value or "") if p.strip()]
    return "".join("<p>" + html.escape(p).replace("\n", "<br>") + "</p>" for p in paragraphs)


class SummaryRenderer:
    """
    Routes a summary through the normalization pipeline that matches its format.

    Every public method is a call site for the heuristic core: if the core
    raises, the failure is logged and the raw text is shown instead.
    """

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        markdown_renderer: Callable[[str], str] = render_markdown,
        sanitizer: Callable[[str], str] = sanitize_html,
    ):
        self.settings = settings or RenderSettings()
        self.markdown_renderer = markdown_renderer
        self.sanitizer = sanitizer

    def normalize(self, raw: Optional[str], fmt=SummaryFormat.PARAGRAPH) -> str:
        fmt = SummaryFormat.parse(fmt)
        try:
            if fmt == SummaryFormat.CORNELL:
                return normalize_cornell(raw or "")
            if fmt == SummaryFormat.SMART:
                return rewrite_smart_markdown(raw or "")
            return normalize_general(raw or "")
        except Exception:
            logger.exception("normalization failed for %s summary", fmt.value)
            return raw or ""

    def sections(self, raw: Optional[str]) -> list[Section]:
        try:
            return split_sections(raw or "")
        except Exception:
            logger.exception("section split failed")
            return [Section(title=FALLBACK_SECTION_TITLE, body=raw or "")]

    def plain_view(self, doc: SummaryDocument) -> list[tuple[Section, list[BulletItem]]]:
        """Sections for the plain (non-HTML) view, with bullet hierarchies for the bullets format."""
        if doc.format == SummaryFormat.CORNELL:
            panels = (
                ("Cues", doc.cornell_cues, CUES_PLACEHOLDER),
                ("Notes", doc.cornell_notes, NOTES_PLACEHOLDER),
                ("Summary", doc.cornell_summary, SUMMARY_PLACEHOLDER),
            )
            return [
                (Section(title=title, body=self.normalize(value, SummaryFormat.CORNELL) or placeholder), [])
                for title, value, placeholder in panels
            ]

        view: list[tuple[Section, list[BulletItem]]] = []
        for section in self.sections(doc.content_raw):
            items: list[BulletItem] = []
            if doc.format == SummaryFormat.BULLETS:
                try:
                    items = parse_hierarchy(section.body)
                except Exception:
                    logger.exception("bullet hierarchy failed for section %r", section.title)
            view.append((section, items))
        return view

    def render_html(self, raw: Optional[str]) -> str:
        """Smart-summary HTML: rewrite, render, enhance, then sanitize."""
        if not raw:
            return ""
        try:
            md = rewrite_smart_markdown(raw)
            rendered = self.markdown_renderer(md)
            return self.sanitizer(enhance_html(rendered))
        except Exception:
            logger.exception("smart summary rendering failed; showing raw text")
            return self.sanitizer(_raw_html(raw))

    def export_text(self, doc: SummaryDocument) -> str:
        if doc.format == SummaryFormat.CORNELL:
            return compose_cornell_text(doc.cornell_cues, doc.cornell_notes, doc.cornell_summary)
        return self.normalize(doc.content_raw, doc.format)

    def pdf_blocks(self, doc: SummaryDocument) -> list[PdfContentBlock]:
        try:
            blocks = extract_pdf_blocks(self.export_text(doc))
        except Exception:
            logger.exception("pdf block extraction failed; exporting raw text")
            blocks = [PdfTextBlock(text=doc.content_raw)] if doc.content_raw else []
        return blocks_or_placeholder(blocks, self.settings.empty_placeholder)

    def export_pdf(self, doc: SummaryDocument) -> bytes:
        generated = doc.created_at.strftime("%Y-%m-%d") if doc.created_at else "Unknown date"
        return render_pdf(
            self.pdf_blocks(doc),
            title=sanitize_file_name(doc.title),
            generated_label=generated,
            settings=self.settings,
        )

    def copy_text(self, doc: SummaryDocument) -> str:
        if doc.format == SummaryFormat.CORNELL:
            return compose_cornell_text(doc.cornell_cues, doc.cornell_notes, doc.cornell_summary, for_copy=True)
        return doc.content_raw or ""
