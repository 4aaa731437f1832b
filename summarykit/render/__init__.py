from .cornell import compose_cornell_text, normalize_cornell
from .html_enhancer import enhance_html, extract_key_row
from .models import (
    BulletItem,
    PdfTableBlock,
    PdfTextBlock,
    Section,
    SmartKeyRow,
    SummaryDocument,
    SummaryFormat,
    TableBlock,
)
from .pdf_blocks import blocks_or_placeholder, extract_pdf_blocks
from .pdf_export import PdfCanvas, PdfExportError, layout_blocks, render_pdf
from .pipeline import SummaryRenderer, sanitize_file_name
from .sections import parse_hierarchy, split_sections
from .smart_markdown import classify_line, rewrite_smart_markdown
from .text_utils import clean_inline, normalize_general, normalize_list_marker

__all__ = [
    "BulletItem",
    "PdfCanvas",
    "PdfExportError",
    "PdfTableBlock",
    "PdfTextBlock",
    "Section",
    "SmartKeyRow",
    "SummaryDocument",
    "SummaryFormat",
    "SummaryRenderer",
    "TableBlock",
    "blocks_or_placeholder",
    "classify_line",
    "clean_inline",
    "compose_cornell_text",
    "enhance_html",
    "extract_key_row",
    "extract_pdf_blocks",
    "layout_blocks",
    "normalize_cornell",
    "normalize_general",
    "normalize_list_marker",
    "parse_hierarchy",
    "render_pdf",
    "rewrite_smart_markdown",
    "sanitize_file_name",
    "split_sections",
]
