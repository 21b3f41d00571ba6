"""Character-budget text layout for generated PDFs.

Line breaking counts characters instead of measuring glyphs: every
character is assumed to be half the font size wide. Lines therefore break
approximately, which is accepted for the generated documents.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .document import A4_PORTRAIT, BLACK, HELVETICA, Color, PageModel, PDFDocumentModel, TextRun

CHAR_WIDTH_RATIO = 0.5
LINE_HEIGHT_RATIO = 1.2


def wrap_text(text: str, max_chars: int) -> list[str]:
    """Greedy word wrap of *text* into lines of at most *max_chars* characters.

    A single word longer than the budget gets a line of its own.
    """

    if max_chars < 1:
        raise ValueError("max_chars must be at least 1")

    lines: list[str] = []
    current = ""
    for word in text.split():
        if current and len(current + word) > max_chars:
            lines.append(current.strip())
            current = word + " "
        else:
            current += word + " "
    if current.strip():
        lines.append(current.strip())
    return lines


def column_budget(width: float, font_size: float, char_width_ratio: float = CHAR_WIDTH_RATIO) -> int:
    """Characters that fit in *width* while leaving room for a trailing space."""

    return max(1, math.floor(width / (font_size * char_width_ratio) - 1))


class TextFlow:
    """Writes lines top to bottom, opening a new page below the margin."""

    def __init__(
        self,
        document: PDFDocumentModel,
        page_size: tuple[float, float] = A4_PORTRAIT,
        *,
        margin: float = 50,
        top: float | None = None,
        font_size: float = 12,
        line_height: float | None = None,
        font: str = HELVETICA,
        page: PageModel | None = None,
    ) -> None:
        self.document = document
        self.page_width, self.page_height = page_size
        self.margin = margin
        self.font_size = font_size
        self.line_height = line_height if line_height is not None else font_size * LINE_HEIGHT_RATIO
        self.font = font
        self.page = page if page is not None else document.add_page(*page_size)
        self.y = top if top is not None else self.page_height - margin

    @property
    def max_chars(self) -> int:
        return column_budget(self.page_width - 2 * self.margin, self.font_size)

    def new_page(self) -> PageModel:
        self.page = self.document.add_page(self.page_width, self.page_height)
        self.y = self.page_height - self.margin
        return self.page

    def ensure_room(self) -> None:
        if self.y < self.margin:
            self.new_page()

    def skip(self, amount: float) -> None:
        self.y -= amount

    def line(
        self,
        text: str,
        *,
        x: float | None = None,
        size: float | None = None,
        font: str | None = None,
        color: Color = BLACK,
        advance: float | None = None,
    ) -> TextRun:
        self.ensure_room()
        run = self.page.draw_text(
            text,
            self.margin if x is None else x,
            self.y,
            size=self.font_size if size is None else size,
            font=font or self.font,
            color=color,
        )
        self.y -= self.line_height if advance is None else advance
        return run

    def row(
        self,
        cells: Iterable[tuple[float, str]],
        *,
        size: float | None = None,
        font: str | None = None,
        advance: float | None = None,
    ) -> None:
        """Draw several cells on the current line, each at its own x."""

        self.ensure_room()
        for x, text in cells:
            self.page.draw_text(
                text,
                x,
                self.y,
                size=self.font_size if size is None else size,
                font=font or self.font,
            )
        self.y -= self.line_height if advance is None else advance

    def paragraph(
        self,
        text: str,
        *,
        max_chars: int | None = None,
        size: float | None = None,
        font: str | None = None,
        advance: float | None = None,
    ) -> int:
        """Wrap and write *text*; returns the number of lines written."""

        lines = wrap_text(text, self.max_chars if max_chars is None else max_chars)
        for text_line in lines:
            self.line(text_line, size=size, font=font, advance=advance)
        return len(lines)


@dataclass(frozen=True)
class TextLayout:
    """A text-backed page: positioned runs plus optional flowed prose."""

    width: float = A4_PORTRAIT[0]
    height: float = A4_PORTRAIT[1]
    runs: Sequence[TextRun] = ()
    text: str | None = None
    font_size: float = 12
    margin: float = 50
    line_height: float | None = None
    max_chars: int | None = None
    text_top: float | None = None

    def render(self, document: PDFDocumentModel) -> list[PageModel]:
        """Add this layout to *document*, returning every page it produced."""

        first = document.add_page(self.width, self.height)
        for run in self.runs:
            first.draw_text(run.text, run.x, run.y, size=run.size, font=run.font, color=run.color)
        if not self.text:
            return [first]

        before = len(document.pages)
        flow = TextFlow(
            document,
            (self.width, self.height),
            margin=self.margin,
            top=self.text_top,
            font_size=self.font_size,
            line_height=self.line_height,
            page=first,
        )
        flow.paragraph(self.text, max_chars=self.max_chars)
        return [first, *document.pages[before:]]


__all__ = ["wrap_text", "column_budget", "TextFlow", "TextLayout"]
