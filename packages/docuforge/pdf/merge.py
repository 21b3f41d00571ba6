"""Merge several PDF documents into one."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..core.exceptions import DecodeError, EncodeError, InsufficientInputError

LOGGER = logging.getLogger("docuforge.pdf")

_METADATA_KEY_MAP = {
    "title": "/Title",
    "author": "/Author",
    "subject": "/Subject",
    "keywords": "/Keywords",
}


def _load_reader(data: bytes, index: int) -> PdfReader:
    if not data:
        raise DecodeError(f"PDF #{index + 1} is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            LOGGER.debug("Attempting to decrypt encrypted PDF #%d", index + 1)
            reader.decrypt("")
        # Force the page tree to load.
        len(reader.pages)
    except (PdfReadError, ValueError, KeyError, TypeError, NotImplementedError) as exc:
        LOGGER.error("Failed to read PDF #%d: %s", index + 1, exc)
        raise DecodeError(f"Invalid PDF #{index + 1}: {exc}") from exc
    return reader


def _document_info(document_info: Mapping[str, object]) -> dict[str, str]:
    values: dict[str, str] = {}
    for key, value in document_info.items():
        if value is None:
            continue
        string_value = str(value).strip()
        if not string_value:
            continue
        pdf_key = _METADATA_KEY_MAP.get(key.lower())
        if pdf_key is None:
            pdf_key = key if key.startswith("/") else f"/{key}"
        values[pdf_key] = string_value
    return values


def merge_pdfs(
    sources: Iterable[bytes],
    *,
    metadata: bool = True,
    document_info: Mapping[str, object] | None = None,
    bookmarks: Sequence[str] | None = None,
) -> bytes:
    """Concatenate the pages of *sources* in order and return the merged bytes.

    Args:
        sources: Raw bytes of each input PDF, in output order.
        metadata: When ``True`` the document information of the first input
            is copied into the merged document.
        document_info: Explicit metadata used instead of the copied metadata.
            ``title``, ``author``, ``subject`` and ``keywords`` map to their
            standard PDF keys.
        bookmarks: Outline titles, one per input. Missing or empty entries
            fall back to ``Document N``.

    Raises:
        InsufficientInputError: If *sources* is empty.
        DecodeError: If any input cannot be parsed.
    """

    documents = list(sources)
    if not documents:
        raise InsufficientInputError("No input PDFs provided")

    writer = PdfWriter()
    first_metadata: Optional[dict[str, str]] = None
    bookmark_targets: list[tuple[str, int]] = []

    for index, data in enumerate(documents):
        reader = _load_reader(data, index)
        start_page_index = len(writer.pages)
        for page in reader.pages:
            writer.add_page(page)
        LOGGER.debug("Added %d page(s) from PDF #%d", len(reader.pages), index + 1)

        if bookmarks is not None:
            title = bookmarks[index] if index < len(bookmarks) else None
            bookmark_targets.append((title or f"Document {index + 1}", start_page_index))

        if metadata and first_metadata is None and reader.metadata:
            first_metadata = {
                key: str(value)
                for key, value in reader.metadata.items()
                if isinstance(key, str) and value is not None
            }

    metadata_to_apply: dict[str, str] | None = None
    if document_info:
        metadata_to_apply = _document_info(document_info)
    elif metadata and first_metadata:
        metadata_to_apply = first_metadata

    if metadata_to_apply:
        LOGGER.debug("Setting metadata on merged PDF: %s", metadata_to_apply)
        writer.add_metadata(metadata_to_apply)

    for title, page_index in bookmark_targets:
        if page_index < len(writer.pages):
            writer.add_outline_item(title, page_index)

    buffer = io.BytesIO()
    try:
        writer.write(buffer)
    except (PdfReadError, ValueError, KeyError, TypeError) as exc:
        LOGGER.error("Failed to write merged PDF: %s", exc)
        raise EncodeError(f"Failed to write merged PDF: {exc}") from exc

    LOGGER.info("Merged %d PDFs into %d page(s)", len(documents), len(writer.pages))
    return buffer.getvalue()


@dataclass
class MergeJob:
    """Collects uploads and merges them once enough have been added."""

    min_sources: int = 2
    sources: list[bytes] = field(default_factory=list)
    names: list[str] = field(default_factory=list)

    def add(self, data: bytes, name: str | None = None) -> "MergeJob":
        self.sources.append(data)
        self.names.append(name or f"Document {len(self.sources)}")
        return self

    def run(
        self,
        *,
        metadata: bool = True,
        document_info: Mapping[str, object] | None = None,
        with_bookmarks: bool = False,
    ) -> bytes:
        if len(self.sources) < self.min_sources:
            raise InsufficientInputError(
                f"At least {self.min_sources} PDF files are required to merge"
            )
        return merge_pdfs(
            self.sources,
            metadata=metadata,
            document_info=document_info,
            bookmarks=self.names if with_bookmarks else None,
        )


__all__ = ["merge_pdfs", "MergeJob"]
