"""Default markdown and sanitizer primitives; both can be swapped out on SummaryRenderer."""
from __future__ import annotations

import bleach
import markdown

MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "nl2br", "sane_lists"]

ALLOWED_TAGS = [
    "p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre", "code",
    "a", "em", "strong", "i", "b", "u", "sub", "sup", "span", "br", "hr",
    "ul", "ol", "li", "table", "thead", "tbody", "tr", "th", "td",
    "section", "div",
]

ALLOWED_ATTRS = {
    "a": ["href", "title"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan"],
    "div": ["class", "data-label"],
    "*": ["class"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def render_markdown(text: str) -> str:
    """GitHub-flavoured tables and hard line breaks, like the web preview."""
    return markdown.markdown(text or "", extensions=MARKDOWN_EXTENSIONS)


def sanitize_html(html_string: str) -> str:
    return bleach.clean(
        html_string or "",
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
