from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

TABLE_PLACEHOLDER = "—"


class SummaryFormat(str, Enum):
    SMART = "smart"
    CORNELL = "cornell"
    BULLETS = "bullets"
    PARAGRAPH = "paragraph"

    @classmethod
    def parse(cls, value) -> "SummaryFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.PARAGRAPH


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str


class BulletItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    children: list[str] = Field(default_factory=list)


def _fit_row(row: list[str], width: int, placeholder: str) -> list[str]:
    cells = [str(c) for c in row]
    if len(cells) > width:
        # Overflow is folded into the last column rather than dropped.
        head = cells[: width - 1]
        tail = " ".join(c for c in cells[width - 1:] if c)
        return head + [tail]
    return cells + [placeholder] * (width - len(cells))


class TableBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    headers: list[str]
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def col_count(self) -> int:
        return len(self.headers)

    @classmethod
    def from_rows(
        cls,
        headers: list[str],
        rows: list[list[str]],
        col_count: Optional[int] = None,
        placeholder: str = TABLE_PLACEHOLDER,
    ):
        """
        Build a block whose header and rows all share one column count.

        Without an explicit `col_count` the widest row wins; shorter rows are
        padded with `placeholder`, longer ones have their tail merged into the
        last cell.
        """
        width = col_count or max([len(headers)] + [len(r) for r in rows])
        width = max(1, width)
        return cls(
            headers=_fit_row(headers, width, placeholder),
            rows=[_fit_row(r, width, placeholder) for r in rows],
        )


class PdfTextBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class PdfTableBlock(TableBlock):
    type: Literal["table"] = "table"


PdfContentBlock = Annotated[Union[PdfTextBlock, PdfTableBlock], Field(discriminator="type")]


class SmartKeyRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str  # keeps its trailing colon, e.g. "Key Concept:"
    title: Optional[str] = None
    detail: Optional[str] = None

    @property
    def kind(self) -> str:
        return self.label.rstrip(":").strip()


class SummaryDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: SummaryFormat = SummaryFormat.PARAGRAPH
    title: str = ""
    content_raw: Optional[str] = None
    cornell_cues: Optional[str] = None
    cornell_notes: Optional[str] = None
    cornell_summary: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("format", mode="before")
    @classmethod
    def _coerce_format(cls, value):
        return SummaryFormat.parse(value)
