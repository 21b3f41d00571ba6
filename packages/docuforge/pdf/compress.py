"""Lossless PDF size reduction.

Metadata is blanked and content streams are re-compressed with pypdf.
When ``qpdf`` is installed and enabled, the result gets a second pass that
packs objects into object streams. A failing qpdf run is logged and the
pypdf output is kept.
"""

from __future__ import annotations

import io
import logging
import subprocess
import tempfile
from pathlib import Path

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..core.config import get_settings
from ..core.exceptions import DecodeError, EncodeError
from ..core.model import CompressionResult
from ..core.utils import run_subprocess, which

LOGGER = logging.getLogger("docuforge.pdf")

PDF_MIME_TYPE = "application/pdf"

STRIPPED_METADATA_KEYS = (
    "/Title",
    "/Author",
    "/Subject",
    "/Keywords",
    "/Producer",
    "/Creator",
)


def _qpdf_available() -> str | None:
    return which(("qpdf",))


def build_qpdf_command(executable: str, source: Path, output: Path) -> list[str]:
    return [
        executable,
        "--stream-data=compress",
        "--object-streams=generate",
        "--recompress-flate",
        str(source),
        str(output),
    ]


def _compress_with_pypdf(data: bytes) -> bytes:
    if not data:
        raise DecodeError("PDF data is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            reader.decrypt("")
        writer = PdfWriter(clone_from=reader)
    except (PdfReadError, ValueError, KeyError, TypeError, NotImplementedError) as exc:
        raise DecodeError(f"Invalid PDF: {exc}") from exc

    for page in writer.pages:
        page.compress_content_streams()
    writer.add_metadata({key: "" for key in STRIPPED_METADATA_KEYS})

    buffer = io.BytesIO()
    try:
        writer.write(buffer)
    except (PdfReadError, ValueError, KeyError, TypeError) as exc:
        raise EncodeError(f"Failed to write compressed PDF: {exc}") from exc
    return buffer.getvalue()


def _compress_with_qpdf(executable: str, data: bytes) -> bytes:
    with tempfile.TemporaryDirectory(prefix="docuforge-") as temp_dir:
        source = Path(temp_dir) / "input.pdf"
        output = Path(temp_dir) / "output.pdf"
        source.write_bytes(data)
        run_subprocess(build_qpdf_command(executable, source, output))
        return output.read_bytes()


def compress_pdf_simple(data: bytes, *, use_external: bool | None = None) -> CompressionResult:
    """Strip document metadata and re-serialize with compressed streams.

    The optimized document is returned even when it is larger than *data*.
    """

    optimized = _compress_with_pypdf(data)

    if use_external is None:
        use_external = get_settings().use_qpdf
    executable = _qpdf_available() if use_external else None
    if executable:
        try:
            optimized = _compress_with_qpdf(executable, optimized)
        except (OSError, subprocess.CalledProcessError) as exc:
            LOGGER.warning("qpdf pass failed, keeping pypdf output: %s", exc)

    LOGGER.info("Compressed PDF from %d to %d bytes", len(data), len(optimized))
    return CompressionResult(data=optimized, original_size=len(data), media_type=PDF_MIME_TYPE)


__all__ = ["PDF_MIME_TYPE", "build_qpdf_command", "compress_pdf_simple"]
