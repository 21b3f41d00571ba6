"""DocuForge: image and PDF document utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .core import (
    CompressionResult,
    DecodeError,
    DocuForgeError,
    DocumentFinalizedError,
    EncodeError,
    EncodeRequest,
    ExternalServiceError,
    ExtractionResult,
    InsufficientInputError,
    RasterImage,
    Settings,
    UnsupportedFormatError,
    configure_logging,
    get_settings,
)
from .imaging import (
    PASSPORT_SIZES,
    ImageFormat,
    PassportPhotoOptions,
    compose,
    compress_image,
    compress_to_target,
    compress_to_target_with_report,
    convert_image_format,
    crop_image,
    remove_background,
    transform,
)
from .imaging.formats import normalize_mime_type
from .pdf import (
    ImagePage,
    MergeJob,
    PDFDocumentModel,
    TextLayout,
    TextPage,
    assemble,
    compress_pdf_simple,
    convert_to_pdf,
    extract,
    merge_pdfs,
    render_template,
)
from .pdf.compress import PDF_MIME_TYPE
from .tools import load_builtin_plugins
from .tools.common.interfaces import ToolContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

load_builtin_plugins()

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "configure_logging",
    "DocuForgeError",
    "DecodeError",
    "EncodeError",
    "UnsupportedFormatError",
    "InsufficientInputError",
    "ExternalServiceError",
    "DocumentFinalizedError",
    "RasterImage",
    "EncodeRequest",
    "ExtractionResult",
    "CompressionResult",
    "ImageFormat",
    "transform",
    "convert_image_format",
    "crop_image",
    "PASSPORT_SIZES",
    "PassportPhotoOptions",
    "compose",
    "remove_background",
    "compress_image",
    "compress_to_target",
    "compress_to_target_with_report",
    "PDFDocumentModel",
    "TextLayout",
    "ImagePage",
    "TextPage",
    "assemble",
    "render_template",
    "convert_to_pdf",
    "merge_pdfs",
    "MergeJob",
    "extract",
    "compress_pdf_simple",
    "compress_bytes",
    "ToolContext",
    "ToolRegistry",
    "register_tool",
    "registry",
    "merge_documents",
    "compress_document",
    "convert_document",
    "extract_text",
]


def compress_bytes(
    source: bytes,
    mime_type: str,
    max_size_bytes: int | None = None,
) -> CompressionResult:
    """Compress an image or a PDF.

    PDFs always go through the metadata-stripping pass. Images are fitted
    below *max_size_bytes* when given, otherwise quick-compressed to JPEG.
    """

    if normalize_mime_type(mime_type) == PDF_MIME_TYPE:
        return compress_pdf_simple(source)
    if max_size_bytes is not None:
        return compress_to_target_with_report(source, mime_type, max_size_bytes)
    return compress_image(source, mime_type)


def merge_documents(inputs: Iterable[str | Path], output: str | Path, **config) -> bytes:
    context = ToolContext(inputs=list(inputs), output_path=output, config=config)
    return registry.run("merge", context)


def compress_document(
    input: str | Path,
    output: str | Path,
    *,
    max_size: int | None = None,
) -> CompressionResult:
    mime_type = ToolContext(input_path=input).source_mime_type()
    tool_name = "compress-pdf" if mime_type == PDF_MIME_TYPE else "compress-image"
    context = ToolContext(input_path=input, output_path=output, config={"max_size": max_size})
    return registry.run(tool_name, context)


def convert_document(input: str | Path, output: str | Path, *, file_type: str | None = None) -> bytes:
    context = ToolContext(input_path=input, output_path=output, config={"file_type": file_type})
    return registry.run("convert", context)


def extract_text(input: str | Path) -> str:
    context = ToolContext(input_path=input)
    return registry.run("extract", context).text or ""
