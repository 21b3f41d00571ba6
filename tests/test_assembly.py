from __future__ import annotations

import io
from typing import Callable

import pytest
from pypdf import PdfReader

from docuforge.core.exceptions import (
    DocumentFinalizedError,
    InsufficientInputError,
    UnsupportedFormatError,
)
from docuforge.pdf.assembly import ImagePage, TextPage, assemble, image_to_pdf, text_to_pdf
from docuforge.pdf.document import HELVETICA_BOLD, PDFDocumentModel, encode_pdf_string
from docuforge.pdf.layout import TextLayout


def _reader(data: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(data))


def _first_image(reader: PdfReader):
    xobjects = reader.pages[0]["/Resources"]["/XObject"]
    return xobjects["/Im1"].get_object()


def test_image_page_matches_pixel_size(png_bytes: bytes) -> None:
    reader = _reader(image_to_pdf(png_bytes, "image/png"))

    assert len(reader.pages) == 1
    box = reader.pages[0].mediabox
    assert (float(box.width), float(box.height)) == (120, 80)
    assert _first_image(reader)["/Filter"] == "/FlateDecode"


def test_jpeg_is_embedded_without_recompression(jpeg_bytes: bytes) -> None:
    image = _first_image(_reader(image_to_pdf(jpeg_bytes, "image/jpeg")))

    assert image["/Filter"] == "/DCTDecode"
    assert image.get_data() == jpeg_bytes


def test_transparent_png_gets_soft_mask(transparent_png: bytes) -> None:
    image = _first_image(_reader(image_to_pdf(transparent_png, "image/png")))
    assert "/SMask" in image


def test_unsupported_image_page(image_factory: Callable[..., bytes]) -> None:
    webp = image_factory("WEBP", (10, 10))
    with pytest.raises(UnsupportedFormatError, match="PNG or JPG"):
        image_to_pdf(webp, "image/webp")


def test_assemble_requires_pages() -> None:
    with pytest.raises(InsufficientInputError):
        assemble([])


def test_assemble_rejects_unknown_spec() -> None:
    with pytest.raises(TypeError):
        assemble([object()])  # type: ignore[list-item]


def test_assemble_mixed_pages_in_order(png_bytes: bytes) -> None:
    data = assemble(
        [ImagePage(png_bytes, "image/png"), TextPage(TextLayout(text="second page text"))],
        metadata={"Title": "Mixed"},
    )
    reader = _reader(data)

    assert len(reader.pages) == 2
    assert float(reader.pages[0].mediabox.width) == 120
    assert float(reader.pages[1].mediabox.width) == 595
    assert "second page text" in reader.pages[1].extract_text()
    assert reader.metadata.title == "Mixed"


def test_text_to_pdf_flows_onto_extra_pages() -> None:
    reader = _reader(text_to_pdf("lorem ipsum " * 600))

    assert len(reader.pages) > 1
    assert "lorem" in reader.pages[-1].extract_text()


def test_document_is_sealed_after_serialize() -> None:
    document = PDFDocumentModel()
    page = document.add_page(100, 100)
    page.draw_text("hi", 10, 10)

    data = document.serialize()

    assert data.startswith(b"%PDF")
    assert document.finalized
    with pytest.raises(DocumentFinalizedError):
        document.serialize()
    with pytest.raises(DocumentFinalizedError):
        document.add_page(100, 100)
    with pytest.raises(DocumentFinalizedError):
        page.draw_text("late", 10, 30)


def test_page_model_validation() -> None:
    document = PDFDocumentModel()
    with pytest.raises(ValueError):
        document.add_page(0, 100)
    page = document.add_page(100, 100)
    with pytest.raises(ValueError):
        page.draw_text("x", 0, 0, font="Comic Sans")
    page.draw_text("bold", 0, 0, font=HELVETICA_BOLD)


def test_rectangle_and_text_are_written() -> None:
    document = PDFDocumentModel()
    page = document.add_page(200, 200)
    page.draw_rectangle(10, 10, 180, 180, border_color=(1, 0, 0), border_width=2)
    page.draw_text("Boxed", 50, 100)

    reader = _reader(document.serialize())
    content = reader.pages[0]["/Contents"].get_object().get_data().decode("latin-1")

    assert "10 10 180 180 re" in content
    assert "(Boxed) Tj" in content


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("plain", "(plain)"),
        ("a(b)\\", "(a\\(b\\)\\\\)"),
        ("€", "(\\200)"),
        ("漢", "(?)"),
    ],
)
def test_encode_pdf_string(text: str, expected: str) -> None:
    assert encode_pdf_string(text) == expected
