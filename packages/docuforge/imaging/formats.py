"""Image format tables used by the bitmap engines."""

from __future__ import annotations

from enum import Enum

from ..core.exceptions import UnsupportedFormatError


class ImageFormat(str, Enum):
    """Raster formats the transform engine can encode."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    BMP = "bmp"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def pillow_format(self) -> str:
        return self.value.upper()

    @property
    def supports_alpha(self) -> bool:
        return self in {ImageFormat.PNG, ImageFormat.WEBP}

    @property
    def uses_quality(self) -> bool:
        return self in {ImageFormat.JPEG, ImageFormat.WEBP}


_MIME_TYPES = {
    ImageFormat.PNG: "image/png",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.WEBP: "image/webp",
    ImageFormat.BMP: "image/bmp",
}

_EXTENSIONS = {
    ImageFormat.PNG: "png",
    ImageFormat.JPEG: "jpg",
    ImageFormat.WEBP: "webp",
    ImageFormat.BMP: "bmp",
}

_ALIASES = {
    "png": ImageFormat.PNG,
    "image/png": ImageFormat.PNG,
    "jpeg": ImageFormat.JPEG,
    "jpg": ImageFormat.JPEG,
    "image/jpeg": ImageFormat.JPEG,
    "image/jpg": ImageFormat.JPEG,
    "image/pjpeg": ImageFormat.JPEG,
    "webp": ImageFormat.WEBP,
    "image/webp": ImageFormat.WEBP,
    "bmp": ImageFormat.BMP,
    "image/bmp": ImageFormat.BMP,
    "image/x-ms-bmp": ImageFormat.BMP,
}

# Containers accepted on decode, keyed by normalised MIME type. GIF can be
# read but is never produced.
DECODABLE_MIME_TYPES: dict[str, str] = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
    "image/bmp": "BMP",
    "image/gif": "GIF",
}


def normalize_mime_type(mime_type: str) -> str:
    """Lower-case *mime_type*, drop parameters and fold known aliases."""

    base = mime_type.split(";", 1)[0].strip().lower()
    if base in {"image/jpg", "image/pjpeg"}:
        return "image/jpeg"
    if base == "image/x-ms-bmp":
        return "image/bmp"
    return base


def resolve_format(value: str | ImageFormat) -> ImageFormat:
    """Resolve a format name, extension or MIME type to :class:`ImageFormat`."""

    if isinstance(value, ImageFormat):
        return value
    key = value.split(";", 1)[0].strip().lower().lstrip(".")
    try:
        return _ALIASES[key]
    except KeyError as exc:
        raise UnsupportedFormatError(f"Unsupported image format: {value}") from exc


def format_for_pillow(pillow_format: str | None) -> ImageFormat | None:
    """Return the encodable format matching a Pillow ``Image.format`` value."""

    if not pillow_format:
        return None
    try:
        return ImageFormat(pillow_format.lower())
    except ValueError:
        return None


__all__ = [
    "ImageFormat",
    "DECODABLE_MIME_TYPES",
    "normalize_mime_type",
    "resolve_format",
    "format_for_pillow",
]
