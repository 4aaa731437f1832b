from __future__ import annotations

import logging
from typing import Optional, Sequence

try:
    import fitz  # PyMuPDF
except ImportError:
    fitz = None

from ..config import RenderSettings
from .models import PdfContentBlock, PdfTableBlock
from .pdf_blocks import blocks_or_placeholder
from .sections import looks_like_heading

logger = logging.getLogger(__name__)

_FONT_REGULAR = "helv"
_FONT_BOLD = "hebo"
_BORDER_COLOR = (0.75, 0.75, 0.78)
_HEADER_FILL = (0.93, 0.94, 0.97)

# The base-14 Helvetica faces only carry a Latin code page.
_BASE14_REPL: dict[str, str] = {
    "•": "-",    # bullet
    "–": "-",    # en dash
    "—": "-",    # em dash
    "‘": "'",
    "’": "'",
    "“": "\"",
    "”": "\"",
    "…": "...",
}


class PdfExportError(RuntimeError):
    pass


def _base14_safe(text: str) -> str:
    for k, v in _BASE14_REPL.items():
        if k in text:
            text = text.replace(k, v)
    return text


class PdfCanvas:
    """Drawing surface over a PyMuPDF document, in top-down page coordinates."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        if fitz is None:
            raise ImportError("PyMuPDF (fitz) not installed.")
        self.settings = settings or RenderSettings()
        self.width = self.settings.page_width
        self.height = self.settings.page_height
        self.margin = self.settings.margin
        self.doc = fitz.open()
        self.page = None
        self.add_page()

    @property
    def page_count(self) -> int:
        return len(self.doc)

    def add_page(self) -> None:
        self.page = self.doc.new_page(width=self.width, height=self.height)

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        return fitz.get_text_length(_base14_safe(text), fontname=_FONT_BOLD if bold else _FONT_REGULAR, fontsize=size)

    def measure_wrapped_lines(self, text: str, max_width: float, size: float, bold: bool = False) -> list[str]:
        lines: list[str] = []
        for para in (text or "").split("\n"):
            words = para.split()
            if not words:
                lines.append("")
                continue
            current = ""
            for word in words:
                candidate = f"{current} {word}" if current else word
                if self.text_width(candidate, size, bold) <= max_width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                # A single word wider than the column is cut by characters.
                while len(word) > 1 and self.text_width(word, size, bold) > max_width:
                    cut = len(word) - 1
                    while cut > 1 and self.text_width(word[:cut], size, bold) > max_width:
                        cut -= 1
                    lines.append(word[:cut])
                    word = word[cut:]
                current = word
            if current:
                lines.append(current)
        return lines

    def draw_text(self, text: str, x: float, y: float, size: float, bold: bool = False) -> None:
        # insert_text anchors at the baseline; callers pass the line's top edge.
        self.page.insert_text(
            fitz.Point(x, y + size),
            _base14_safe(text),
            fontname=_FONT_BOLD if bold else _FONT_REGULAR,
            fontsize=size,
        )

    def draw_rect(self, x: float, y: float, w: float, h: float, fill=None) -> None:
        self.page.draw_rect(fitz.Rect(x, y, x + w, y + h), color=_BORDER_COLOR, fill=fill, width=0.6)

    def to_bytes(self) -> bytes:
        return self.doc.tobytes()

    def close(self) -> None:
        self.doc.close()


def _ensure_space(canvas, y: float, needed: float) -> float:
    if y + needed > canvas.height - canvas.margin:
        canvas.add_page()
        return canvas.margin
    return y


def _layout_text(canvas, text: str, y: float, s: RenderSettings) -> float:
    width = canvas.width - canvas.margin * 2
    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            y += s.line_height / 2
            continue
        is_heading = looks_like_heading(line, max_chars=s.heading_max_chars)
        size = s.heading_font_size if is_heading else s.body_font_size
        if is_heading:
            y += s.line_height / 4
        for wrapped in canvas.measure_wrapped_lines(line, width, size, bold=is_heading):
            y = _ensure_space(canvas, y, s.line_height)
            canvas.draw_text(wrapped, canvas.margin, y, size, bold=is_heading)
            y += s.line_height
    return y


def _layout_table(canvas, block: PdfTableBlock, y: float, s: RenderSettings) -> float:
    width = canvas.width - canvas.margin * 2
    col_w = width / max(1, block.col_count)
    inner_w = max(1.0, col_w - s.table_cell_padding * 2)

    def measure(cells: Sequence[str], bold: bool):
        wrapped = [canvas.measure_wrapped_lines(c, inner_w, s.table_font_size, bold) or [""] for c in cells]
        tallest = max(len(w) for w in wrapped)
        height = max(s.min_row_height, tallest * s.table_line_height + s.table_cell_padding * 2)
        return wrapped, height

    def draw(wrapped, height: float, top: float, header: bool) -> None:
        for col, lines in enumerate(wrapped):
            x = canvas.margin + col * col_w
            canvas.draw_rect(x, top, col_w, height, fill=_HEADER_FILL if header else None)
            ty = top + s.table_cell_padding
            for ln in lines:
                canvas.draw_text(ln, x + s.table_cell_padding, ty, s.table_font_size, bold=header)
                ty += s.table_line_height

    header_wrapped, header_h = measure(block.headers, True)
    first_h = measure(block.rows[0], False)[1] if block.rows else 0
    y = _ensure_space(canvas, y, header_h + first_h)
    draw(header_wrapped, header_h, y, True)
    y += header_h

    for row in block.rows:
        wrapped, height = measure(row, False)
        if y + height > canvas.height - canvas.margin:
            # Headers repeat at the top of every page the table spans.
            canvas.add_page()
            y = canvas.margin
            draw(header_wrapped, header_h, y, True)
            y += header_h
        draw(wrapped, height, y, False)
        y += height
    return y + s.line_height / 2


def layout_blocks(
    canvas,
    blocks: list[PdfContentBlock],
    settings: Optional[RenderSettings] = None,
    *,
    title: Optional[str] = None,
    generated_label: Optional[str] = None,
) -> float:
    """Draw blocks onto `canvas` in order; returns the final y position."""
    s = settings or RenderSettings()
    y = canvas.margin
    if title:
        for line in canvas.measure_wrapped_lines(title, canvas.width - canvas.margin * 2, s.title_font_size, bold=True):
            canvas.draw_text(line, canvas.margin, y, s.title_font_size, bold=True)
            y += s.title_font_size + 4
    if generated_label:
        canvas.draw_text(f"Generated: {generated_label}", canvas.margin, y, s.meta_font_size)
        y += s.meta_font_size + 13

    for block in blocks_or_placeholder(list(blocks), s.empty_placeholder):
        if isinstance(block, PdfTableBlock):
            y = _layout_table(canvas, block, y, s)
        else:
            y = _layout_text(canvas, block.text, y, s)
    return y


def render_pdf(
    blocks: list[PdfContentBlock],
    *,
    title: Optional[str] = None,
    generated_label: Optional[str] = None,
    settings: Optional[RenderSettings] = None,
) -> bytes:
    """Render content blocks to PDF bytes."""
    s = settings or RenderSettings()
    try:
        canvas = PdfCanvas(s)
    except ImportError as e:
        raise PdfExportError(str(e)) from e
    try:
        layout_blocks(canvas, blocks, s, title=title, generated_label=generated_label)
        data = canvas.to_bytes()
        logger.debug("rendered %d block(s) onto %d page(s)", len(blocks), canvas.page_count)
        return data
    except Exception as e:
        raise PdfExportError(f"PDF rendering failed: {e}") from e
    finally:
        canvas.close()
