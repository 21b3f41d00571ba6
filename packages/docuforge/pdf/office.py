"""Office document to PDF conversion.

Reading is delegated to an :class:`OfficeDocumentReader`; the bundled
readers use python-docx and openpyxl. Layout is the character-budget
approximation from :mod:`docuforge.pdf.layout`, not a real typesetter.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..core.exceptions import DecodeError, UnsupportedFormatError
from ..imaging.formats import normalize_mime_type
from .assembly import IMAGE_PAGE_MIME_TYPES, image_to_pdf
from .document import A4_LANDSCAPE, A4_PORTRAIT, PDFDocumentModel
from .layout import TextFlow

LOGGER = logging.getLogger("docuforge.pdf")

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Coarse upload categories accepted in place of a MIME type.
CONVERSION_CATEGORIES = {"word": DOCX_MIME_TYPE, "excel": XLSX_MIME_TYPE}

WORD_FONT_SIZE = 12
WORD_MARGIN = 50

SHEET_FONT_SIZE = 10
SHEET_MARGIN = 30
SHEET_CELL_PADDING = 5
SHEET_COLUMN_WIDTH = 100
SHEET_CELL_CHARS = 20

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class OfficeContent:
    """Plain content pulled out of an office file."""

    text: str = ""
    rows: tuple[tuple[str, ...], ...] = ()


@runtime_checkable
class OfficeDocumentReader(Protocol):
    def read(self, data: bytes) -> OfficeContent:
        ...


class DocxReader:
    """Reads body paragraphs and table cells, in document order, as one string."""

    def read(self, data: bytes) -> OfficeContent:
        try:
            document = Document(io.BytesIO(data))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
            raise DecodeError(f"Failed to read Word document: {exc}") from exc

        chunks: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                for row in block.rows:
                    chunks.extend(cell.text for cell in row.cells)
            else:
                chunks.append(block.text)
        text = _WHITESPACE.sub(" ", " ".join(chunks)).strip()
        return OfficeContent(text=text)


class XlsxReader:
    """Reads the first worksheet as rows of display strings."""

    def read(self, data: bytes) -> OfficeContent:
        try:
            workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
            raise DecodeError(f"Failed to read spreadsheet: {exc}") from exc

        try:
            if not workbook.worksheets:
                raise DecodeError("No worksheet found in Excel file")
            sheet = workbook.worksheets[0]
            rows = []
            for values in sheet.iter_rows(values_only=True):
                cells = tuple("" if value is None else str(value) for value in values)
                if any(cells):
                    rows.append(_trim_trailing_empty(cells))
        finally:
            workbook.close()
        return OfficeContent(rows=tuple(rows))


def _trim_trailing_empty(cells: tuple[str, ...]) -> tuple[str, ...]:
    end = len(cells)
    while end and not cells[end - 1]:
        end -= 1
    return cells[:end]


def convert_word_to_pdf(data: bytes, reader: OfficeDocumentReader | None = None) -> bytes:
    """Lay the text of a Word document out on A4 portrait pages."""

    content = (reader or DocxReader()).read(data)
    document = PDFDocumentModel()
    flow = TextFlow(document, A4_PORTRAIT, margin=WORD_MARGIN, font_size=WORD_FONT_SIZE)
    lines = flow.paragraph(content.text)
    LOGGER.info("Converted Word document: %d line(s) on %d page(s)", lines, len(document.pages))
    return document.serialize()


def convert_excel_to_pdf(data: bytes, reader: OfficeDocumentReader | None = None) -> bytes:
    """Print the first worksheet on A4 landscape pages with fixed columns.

    Empty cells take no column: each drawn cell sits 100 pt right of the
    previous one. Cells past the right edge run off the page.
    """

    content = (reader or XlsxReader()).read(data)
    document = PDFDocumentModel()
    flow = TextFlow(
        document,
        A4_LANDSCAPE,
        margin=SHEET_MARGIN,
        font_size=SHEET_FONT_SIZE,
        line_height=SHEET_FONT_SIZE + SHEET_CELL_PADDING,
    )
    for cells in content.rows:
        values = [value[:SHEET_CELL_CHARS] for value in cells if value]
        flow.row((SHEET_MARGIN + index * SHEET_COLUMN_WIDTH, value) for index, value in enumerate(values))
    LOGGER.info("Converted worksheet: %d row(s) on %d page(s)", len(content.rows), len(document.pages))
    return document.serialize()


def resolve_conversion_type(file_type: str | None, detected: str | None) -> str:
    """Turn a ``fileType`` value into the MIME type to convert from.

    ``image``, ``word`` and ``excel`` are categories; ``image`` keeps the
    *detected* type, which must be PNG or JPEG. Any other value is taken
    as a MIME type, and no value at all falls back to *detected*.
    """

    declared = (file_type or "").strip()
    if not declared:
        return detected or ""
    category = declared.lower()
    if category == "image":
        mime_type = normalize_mime_type(detected or "")
        if mime_type not in IMAGE_PAGE_MIME_TYPES:
            raise UnsupportedFormatError(f"Unsupported image format: {detected or 'unknown'}")
        return mime_type
    return CONVERSION_CATEGORIES.get(category, declared)


def convert_to_pdf(data: bytes, mime_type: str) -> bytes:
    """Convert an image, Word or Excel file to PDF based on *mime_type*."""

    normalized = normalize_mime_type(mime_type)
    if normalized in IMAGE_PAGE_MIME_TYPES:
        return image_to_pdf(data, normalized)
    if normalized == DOCX_MIME_TYPE:
        return convert_word_to_pdf(data)
    if normalized == XLSX_MIME_TYPE:
        return convert_excel_to_pdf(data)
    raise UnsupportedFormatError(f"Cannot convert {mime_type} to PDF")


__all__ = [
    "DOCX_MIME_TYPE",
    "XLSX_MIME_TYPE",
    "CONVERSION_CATEGORIES",
    "OfficeContent",
    "OfficeDocumentReader",
    "DocxReader",
    "XlsxReader",
    "convert_word_to_pdf",
    "convert_excel_to_pdf",
    "resolve_conversion_type",
    "convert_to_pdf",
]
