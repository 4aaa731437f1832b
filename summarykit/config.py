from __future__ import annotations

import os
from dataclasses import dataclass

# Points, (width, height).
_PAGE_SIZES: dict[str, tuple[float, float]] = {
    "a4": (595.28, 841.89),
    "letter": (612.0, 792.0),
}


@dataclass(frozen=True)
class RenderSettings:
    page_width: float = 595.28
    page_height: float = 841.89
    margin: float = 48.0
    title_font_size: float = 18.0
    meta_font_size: float = 11.0
    body_font_size: float = 11.0
    heading_font_size: float = 13.0
    line_height: float = 16.0
    table_font_size: float = 9.5
    table_line_height: float = 12.0
    table_cell_padding: float = 4.0
    min_row_height: float = 20.0
    heading_max_chars: int = 80
    table_placeholder: str = "—"
    empty_placeholder: str = "No content available."

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin * 2


def _env_float(name: str, default: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings() -> RenderSettings:
    page = (os.environ.get("SUMMARYKIT_PDF_PAGE_SIZE") or "a4").strip().lower()
    # Unknown paper names quietly fall back to A4.
    width, height = _PAGE_SIZES.get(page, _PAGE_SIZES["a4"])

    defaults = RenderSettings()
    return RenderSettings(
        page_width=width,
        page_height=height,
        margin=_env_float("SUMMARYKIT_PDF_MARGIN", defaults.margin),
        body_font_size=_env_float("SUMMARYKIT_PDF_BODY_FONT_SIZE", defaults.body_font_size),
        line_height=_env_float("SUMMARYKIT_PDF_LINE_HEIGHT", defaults.line_height),
    )
