from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image
from pypdf import PdfReader

from docuforge.core.exceptions import InsufficientInputError
from docuforge.pdf.extract import TextLayerResult
from docuforge.tools import load_builtin_plugins
from docuforge.tools.common.interfaces import BaseTool, ToolContext, guess_mime_type
from docuforge.tools.common.pipeline import ToolRegistry, registry


def setup_module(module):
    load_builtin_plugins()


def test_builtin_tools_are_registered() -> None:
    assert set(registry.names()) >= {
        "compress-image",
        "convert-image",
        "crop",
        "passport",
        "compress-pdf",
        "merge",
        "extract",
        "convert",
        "make",
    }
    assert registry.get("merge").name == "merge"


def test_loading_plugins_twice_is_harmless() -> None:
    load_builtin_plugins()
    assert registry.get("crop") is not None


def test_registry_rejects_duplicates() -> None:
    local = ToolRegistry()
    local.register("noop", BaseTool)

    with pytest.raises(ValueError):
        local.register("noop", BaseTool)


def test_registry_unknown_tool() -> None:
    with pytest.raises(KeyError):
        registry.create("does-not-exist", ToolContext())


def test_context_without_source() -> None:
    with pytest.raises(InsufficientInputError):
        ToolContext().load_source()


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("scan.PDF", "application/pdf"),
        ("photo.jpg", "image/jpeg"),
        ("report.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
        ("sheet.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    ],
)
def test_guess_mime_type(name: str, expected: str) -> None:
    assert guess_mime_type(name) == expected


def test_merge_tool_from_bytes(pdf_factory) -> None:
    context = ToolContext(sources=[pdf_factory(pages=1), pdf_factory(pages=4)])

    data = registry.create("merge", context).run()

    assert context.resources["output"] == data
    assert len(PdfReader(io.BytesIO(data)).pages) == 5


def test_merge_tool_from_paths(write_file, pdf_factory, tmp_path: Path) -> None:
    inputs = [write_file("a.pdf", pdf_factory()), write_file("b.pdf", pdf_factory())]
    output = tmp_path / "merged.pdf"
    context = ToolContext(inputs=inputs, output_path=output, config={"with_bookmarks": True})

    registry.create("merge", context).run()

    assert [item.title for item in PdfReader(output).outline] == ["a", "b"]


def test_convert_tool_uses_declared_type(png_bytes: bytes) -> None:
    context = ToolContext(source=png_bytes, config={"file_type": "image/png"})

    data = registry.create("convert", context).run()

    assert data.startswith(b"%PDF")


def test_crop_tool_with_bytes(png_bytes: bytes) -> None:
    context = ToolContext(source=png_bytes, mime_type="image/png", config={"box": [0, 0, 60, 40]})

    data = registry.create("crop", context).run()

    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (60, 40)


def test_passport_tool_custom_size(png_bytes: bytes) -> None:
    context = ToolContext(source=png_bytes, config={"width": 200, "height": 250, "background": "#EEEEEE"})

    data = registry.create("passport", context).run()

    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (200, 250)


def test_make_tool_with_payload() -> None:
    context = ToolContext(
        config={
            "template": "certificate",
            "payload": {
                "recipientName": "Ada Lovelace",
                "courseName": "Analytical Engines",
                "date": "1843-09-01",
                "instructorName": "Charles Babbage",
            },
        }
    )

    data = registry.create("make", context).run()

    assert "Ada Lovelace" in PdfReader(io.BytesIO(data)).pages[0].extract_text()


def test_extract_tool_with_custom_extractor(text_pdf: bytes) -> None:
    class FixedExtractor:
        def extract_text(self, data: bytes) -> TextLayerResult:
            return TextLayerResult(text="fixed", page_count=1)

    context = ToolContext(source=text_pdf, resources={"extractor": FixedExtractor()})

    result = registry.create("extract", context).run()

    assert result.text == "fixed"
    assert result.page_count == 1
    assert context.resources["output"] == b"fixed"


def test_registry_rejects_non_tools() -> None:
    with pytest.raises(TypeError):
        ToolRegistry().register("bogus", dict)


def test_registry_run_and_membership(png_bytes: bytes) -> None:
    assert "convert-image" in registry
    assert "split" not in registry

    context = ToolContext(source=png_bytes, mime_type="image/png", config={"format": "bmp"})
    data = registry.run("convert-image", context)

    assert data[:2] == b"BM"


def test_package_helpers(write_file, pdf_factory, text_pdf: bytes, tmp_path: Path) -> None:
    import docuforge

    inputs = [write_file("a.pdf", pdf_factory(pages=2)), write_file("b.pdf", pdf_factory())]
    merged = tmp_path / "merged.pdf"
    docuforge.merge_documents(inputs, merged)
    assert len(PdfReader(merged).pages) == 3

    result = docuforge.compress_document(merged, tmp_path / "small.pdf")
    assert result.media_type == "application/pdf"

    assert "Hello DocuForge" in docuforge.extract_text(write_file("text.pdf", text_pdf))
