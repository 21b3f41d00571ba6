"""Text extraction from PDF documents.

The engine itself only counts pages; the text layer is read by a
:class:`TextExtractor`. Two are provided: :class:`PypdfTextExtractor`
reads the text layer in-process and :class:`RemoteTextExtractor` posts the
document to an HTTP service (for example the ``/pdf-extract`` endpoint of
the bundled backend).
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..core.config import get_settings
from ..core.exceptions import DecodeError, DocuForgeError, ExternalServiceError
from ..core.model import ExtractionResult

LOGGER = logging.getLogger("docuforge.pdf")

PAGE_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class TextLayerResult:
    text: str
    page_count: int
    info: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class TextExtractor(Protocol):
    """Reads the full text layer of a PDF."""

    def extract_text(self, data: bytes) -> TextLayerResult:
        ...


def _open_reader(data: bytes) -> PdfReader:
    if not data:
        raise DecodeError("PDF data is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            reader.decrypt("")
        len(reader.pages)
    except (PdfReadError, ValueError, KeyError, TypeError, NotImplementedError) as exc:
        raise DecodeError(f"Invalid PDF: {exc}") from exc
    return reader


def get_page_count(data: bytes) -> int:
    """Return the number of pages in *data*."""

    return len(_open_reader(data).pages)


def _document_info(reader: PdfReader) -> dict[str, Any]:
    if not reader.metadata:
        return {}
    return {
        key.lstrip("/"): str(value)
        for key, value in reader.metadata.items()
        if isinstance(key, str) and value is not None
    }


class PypdfTextExtractor:
    """Extracts text locally with pypdf, pages separated by a blank line."""

    def extract_text(self, data: bytes) -> TextLayerResult:
        reader = _open_reader(data)
        chunks = []
        for page in reader.pages:
            chunks.append((page.extract_text() or "").strip())
        return TextLayerResult(
            text=PAGE_SEPARATOR.join(chunks).strip(),
            page_count=len(reader.pages),
            info=_document_info(reader),
        )


class RemoteTextExtractor:
    """Posts the PDF to an extraction service and relays its answer.

    The service receives a multipart upload named ``file`` and must answer
    with JSON of the shape ``{"text": str, "pageCount": int, "info": {}}``.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout if timeout is not None else get_settings().extract_timeout
        self._client = client

    def _post(self, data: bytes) -> httpx.Response:
        files = {"file": ("document.pdf", data, "application/pdf")}
        if self._client is not None:
            return self._client.post(self.url, files=files, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.url, files=files)

    def extract_text(self, data: bytes) -> TextLayerResult:
        try:
            response = self._post(data)
        except httpx.HTTPError as exc:
            LOGGER.error("Extraction service call to %s failed: %s", self.url, exc)
            raise ExternalServiceError(f"Extraction service unreachable: {exc}") from exc

        if not response.is_success:
            LOGGER.error("Extraction service returned HTTP %s", response.status_code)
            raise ExternalServiceError(
                f"Extraction service returned HTTP {response.status_code}"
            )

        try:
            payload = response.json()
            text = payload.get("text") or ""
            page_count = int(payload["pageCount"])
            info = payload.get("info") or {}
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ExternalServiceError("Extraction service returned a malformed response") from exc
        return TextLayerResult(text=text, page_count=page_count, info=dict(info))


def get_default_extractor() -> TextExtractor:
    """Remote extractor when ``DOCUFORGE_EXTRACT_URL`` is set, else pypdf."""

    settings = get_settings()
    if settings.extract_url:
        return RemoteTextExtractor(settings.extract_url, timeout=settings.extract_timeout)
    return PypdfTextExtractor()


def extract(
    data: bytes,
    want_text: bool = True,
    want_images: bool = False,
    *,
    extractor: TextExtractor | None = None,
) -> ExtractionResult:
    """Extract the text layer and page count of a PDF.

    Raises:
        DecodeError: If *data* is not a readable PDF.
        ExternalServiceError: If the text extractor fails.
        NotImplementedError: If images are requested.
    """

    page_count = get_page_count(data)
    if want_images:
        LOGGER.warning("Image extraction requested but not supported")
        raise NotImplementedError("Image extraction from PDF is not supported")

    if not want_text:
        return ExtractionResult(page_count=page_count)

    extractor = extractor or get_default_extractor()
    try:
        layer = extractor.extract_text(data)
    except DocuForgeError:
        raise
    except Exception as exc:
        LOGGER.error("Text extractor %s failed: %s", type(extractor).__name__, exc)
        raise ExternalServiceError(f"Text extraction failed: {exc}") from exc

    LOGGER.info("Extracted %d character(s) from %d page(s)", len(layer.text), page_count)
    return ExtractionResult(page_count=page_count, text=layer.text, info=layer.info)


__all__ = [
    "TextLayerResult",
    "TextExtractor",
    "PypdfTextExtractor",
    "RemoteTextExtractor",
    "get_default_extractor",
    "get_page_count",
    "extract",
]
