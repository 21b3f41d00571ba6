"""Bitmap transform engine.

Decodes a source image, optionally downsizes it, paints it onto a fresh
canvas and re-encodes it in the requested format. Every call works on its
own buffers; the source bytes are never modified.
"""

from __future__ import annotations

import io
import logging
from typing import Sequence

from PIL import Image, ImageOps, UnidentifiedImageError

from ..core.exceptions import DecodeError, EncodeError, UnsupportedFormatError
from ..core.model import EncodeRequest, RasterImage, normalize_quality
from .filters import apply_tone, parse_color
from .formats import DECODABLE_MIME_TYPES, ImageFormat, normalize_mime_type, resolve_format

LOGGER = logging.getLogger("docuforge.imaging")

DEFAULT_BACKGROUND = "#FFFFFF"
CONVERT_JPEG_QUALITY = 0.92

_PASSTHROUGH_MODES = {"RGB", "RGBA", "L", "LA"}


def decode_image(data: bytes, mime_type: str | None = None) -> RasterImage:
    """Decode *data* into a :class:`RasterImage`.

    When *mime_type* is given the decoded container must match it.
    """

    expected: str | None = None
    if mime_type is not None:
        expected = DECODABLE_MIME_TYPES.get(normalize_mime_type(mime_type))
        if expected is None:
            raise UnsupportedFormatError(f"Unsupported image type: {mime_type}")
    if not data:
        raise DecodeError("Source image is empty")

    try:
        with Image.open(io.BytesIO(data)) as opened:
            detected = opened.format
            opened.load()
            pixels = ImageOps.exif_transpose(opened)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Failed to decode image: {exc}") from exc

    if detected == "MPO":
        detected = "JPEG"
    if expected is not None and detected != expected:
        raise DecodeError(f"Declared type {mime_type} does not match {detected} data")

    LOGGER.debug("Decoded %s image %sx%s (%s)", detected, pixels.width, pixels.height, pixels.mode)
    return RasterImage(pixels=pixels, source_format=detected)


def fit_within(width: int, height: int, max_dimension: int | None) -> tuple[int, int]:
    """Return ``(width, height)`` scaled so the longer side is at most *max_dimension*."""

    if max_dimension is None or (width <= max_dimension and height <= max_dimension):
        return width, height
    if width >= height:
        return max_dimension, max(1, round(height * max_dimension / width))
    return max(1, round(width * max_dimension / height)), max_dimension


def render_canvas(
    pixels: Image.Image,
    size: tuple[int, int],
    target: ImageFormat,
    background_color: str | None = None,
) -> Image.Image:
    """Draw *pixels* onto a new canvas of *size* suitable for *target*."""

    if pixels.size != size:
        pixels = pixels.resize(size, Image.Resampling.LANCZOS)

    if target.supports_alpha and background_color is None:
        if pixels.mode in _PASSTHROUGH_MODES:
            return pixels.copy()
        return pixels.convert("RGBA" if pixels.has_transparency_data else "RGB")

    canvas = Image.new("RGBA", size, parse_color(background_color or DEFAULT_BACKGROUND))
    canvas.alpha_composite(pixels.convert("RGBA"))
    if target.supports_alpha:
        return canvas
    return canvas.convert("RGB")


def encode_image(image: Image.Image, target: ImageFormat, quality: float = 100) -> bytes:
    """Encode *image* as *target*; *quality* only affects lossy formats."""

    params: dict[str, object] = {}
    if target.uses_quality:
        params["quality"] = normalize_quality(quality)
    if target is ImageFormat.JPEG and image.mode not in {"RGB", "L"}:
        image = image.convert("RGB")
    elif target is ImageFormat.BMP and image.mode not in {"1", "L", "P", "RGB"}:
        image = image.convert("RGB")

    buffer = io.BytesIO()
    try:
        image.save(buffer, format=target.pillow_format, **params)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode {target.value} image: {exc}") from exc
    return buffer.getvalue()


def transform(source: bytes, source_mime_type: str | None, request: EncodeRequest) -> bytes:
    """Decode, resize, recompose and re-encode *source* according to *request*."""

    target = resolve_format(request.target_format)
    raster = decode_image(source, source_mime_type)
    size = fit_within(raster.width, raster.height, request.max_dimension)
    pixels = apply_tone(raster.pixels, request.brightness, request.contrast)
    canvas = render_canvas(pixels, size, target, request.background_color)
    result = encode_image(canvas, target, request.quality_percent)
    LOGGER.debug(
        "Transformed %sx%s %s -> %sx%s %s (%d bytes)",
        raster.width,
        raster.height,
        raster.source_format,
        size[0],
        size[1],
        target.value,
        len(result),
    )
    return result


def convert_image_format(
    source: bytes,
    source_mime_type: str | None,
    target_format: str | ImageFormat,
    *,
    background_color: str | None = None,
) -> bytes:
    """Convert *source* to *target_format* at the converter's fixed quality."""

    target = resolve_format(target_format)
    quality = CONVERT_JPEG_QUALITY if target is ImageFormat.JPEG else 1.0
    request = EncodeRequest(
        target_format=target.value,
        quality=quality,
        background_color=background_color,
    )
    return transform(source, source_mime_type, request)


def crop_image(
    source: bytes,
    source_mime_type: str | None,
    *,
    box: Sequence[int] | None = None,
    scale: float = 1.0,
    target_format: str | ImageFormat = ImageFormat.PNG,
    quality: float = 1.0,
) -> bytes:
    """Crop *source* to *box* (left, top, right, bottom) and scale the result."""

    if scale <= 0:
        raise ValueError("scale must be greater than zero")

    target = resolve_format(target_format)
    raster = decode_image(source, source_mime_type)
    pixels = raster.pixels
    if box is not None:
        left, top, right, bottom = (int(value) for value in box)
        if not (0 <= left < right <= raster.width and 0 <= top < bottom <= raster.height):
            raise ValueError(
                f"Crop box {tuple(box)} is outside the {raster.width}x{raster.height} image"
            )
        pixels = pixels.crop((left, top, right, bottom))

    size = (max(1, round(pixels.width * scale)), max(1, round(pixels.height * scale)))
    canvas = render_canvas(pixels, size, target)
    return encode_image(canvas, target, quality)


__all__ = [
    "decode_image",
    "fit_within",
    "render_canvas",
    "encode_image",
    "transform",
    "convert_image_format",
    "crop_image",
]
