"""PDF assembly engine: builds documents from image and text page specs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from ..core.exceptions import InsufficientInputError, UnsupportedFormatError
from ..imaging.formats import normalize_mime_type
from .document import A4_PORTRAIT, PDFDocumentModel, embed_image
from .layout import TextLayout

LOGGER = logging.getLogger("docuforge.pdf")

IMAGE_PAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg"})


@dataclass(frozen=True)
class ImagePage:
    """One page sized exactly to the pixel dimensions of *data*."""

    data: bytes
    mime_type: str


@dataclass(frozen=True)
class TextPage:
    layout: TextLayout


PageSpec = Union[ImagePage, TextPage]


def _add_image_page(document: PDFDocumentModel, spec: ImagePage) -> None:
    mime_type = normalize_mime_type(spec.mime_type)
    if mime_type not in IMAGE_PAGE_MIME_TYPES:
        raise UnsupportedFormatError(
            f"Unsupported image format {spec.mime_type}. Please use PNG or JPG."
        )
    image = embed_image(spec.data, mime_type)
    page = document.add_page(image.width, image.height)
    page.draw_image(image, 0, 0, image.width, image.height)


def assemble(pages: Iterable[PageSpec], *, metadata: dict[str, str] | None = None) -> bytes:
    """Build a PDF from *pages* in order and return its bytes."""

    document = PDFDocumentModel(metadata=metadata)
    count = 0
    for spec in pages:
        count += 1
        if isinstance(spec, ImagePage):
            _add_image_page(document, spec)
        elif isinstance(spec, TextPage):
            spec.layout.render(document)
        else:
            raise TypeError(f"Unknown page spec: {type(spec).__name__}")

    if count == 0:
        raise InsufficientInputError("At least one page is required to assemble a PDF")

    data = document.serialize()
    LOGGER.info("Assembled %d page spec(s) into %d page(s)", count, len(document.pages))
    return data


def image_to_pdf(data: bytes, mime_type: str) -> bytes:
    """Wrap a single PNG or JPEG image in a one-page PDF."""

    return assemble([ImagePage(data, mime_type)])


def text_to_pdf(
    text: str,
    *,
    page_size: tuple[float, float] = A4_PORTRAIT,
    font_size: float = 12,
    margin: float = 50,
) -> bytes:
    """Flow plain *text* across as many pages as it needs."""

    layout = TextLayout(
        width=page_size[0],
        height=page_size[1],
        text=text,
        font_size=font_size,
        margin=margin,
    )
    return assemble([TextPage(layout)])


__all__ = [
    "IMAGE_PAGE_MIME_TYPES",
    "ImagePage",
    "TextPage",
    "PageSpec",
    "assemble",
    "image_to_pdf",
    "text_to_pdf",
]
