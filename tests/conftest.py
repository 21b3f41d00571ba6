from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Callable
import sys

import pytest
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for entry in (PROJECT_ROOT, PROJECT_ROOT / "packages"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from docuforge.core.config import ENV_PREFIX, reset_settings  # noqa: E402
from docuforge.pdf.assembly import text_to_pdf  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def image_factory() -> Callable[..., bytes]:
    def _create(
        fmt: str = "PNG",
        size: tuple[int, int] = (64, 48),
        color: tuple[int, ...] | str = (200, 40, 40),
        mode: str = "RGB",
        **save_options,
    ) -> bytes:
        image = Image.new(mode, size, color)
        buffer = io.BytesIO()
        image.save(buffer, format=fmt, **save_options)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def png_bytes(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory("PNG", (120, 80))


@pytest.fixture()
def jpeg_bytes(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory("JPEG", (120, 80), quality=95)


@pytest.fixture()
def transparent_png(image_factory: Callable[..., bytes]) -> bytes:
    return image_factory("PNG", (40, 40), (0, 0, 0, 0), mode="RGBA")


@pytest.fixture()
def noisy_png() -> bytes:
    image = Image.effect_noise((256, 256), 80).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    def _create(
        pages: int = 1,
        width: float = 72,
        height: float = 72,
        metadata: dict[str, str] | None = None,
    ) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=width, height=height)
        if metadata:
            writer.add_metadata(metadata)
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _create


@pytest.fixture()
def text_pdf() -> bytes:
    return text_to_pdf("Hello DocuForge extraction test")


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    def _write(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
