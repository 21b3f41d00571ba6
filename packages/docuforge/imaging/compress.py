"""Quality-driven image compression helpers."""

from __future__ import annotations

import logging
from typing import Iterator

from ..core.config import get_settings
from ..core.exceptions import DecodeError, UnsupportedFormatError
from ..core.model import CompressionResult, EncodeRequest
from .formats import ImageFormat, format_for_pillow, normalize_mime_type, resolve_format
from .transform import decode_image, transform

LOGGER = logging.getLogger("docuforge.imaging")

START_QUALITY = 90
QUALITY_STEP = 10
QUALITY_FLOOR = 10
QUICK_QUALITY = 0.7


def _source_format(source: bytes, mime_type: str | None) -> ImageFormat:
    if mime_type is not None:
        return resolve_format(normalize_mime_type(mime_type))
    detected = format_for_pillow(decode_image(source).source_format)
    if detected is None:
        raise UnsupportedFormatError("Cannot re-encode this image in its own format")
    return detected


def compress_image_with_quality(source: bytes, mime_type: str | None, quality: float) -> bytes:
    """Re-encode *source* in its own format at *quality* (0-100 or 0.0-1.0)."""

    target = _source_format(source, mime_type)
    request = EncodeRequest(target_format=target.value, quality=quality)
    return transform(source, mime_type, request)


def iter_quality_attempts(source: bytes, mime_type: str | None) -> Iterator[tuple[int, bytes]]:
    """Yield ``(quality, encoded)`` for qualities 90, 80, ... 10."""

    for quality in range(START_QUALITY, QUALITY_FLOOR - 1, -QUALITY_STEP):
        yield quality, compress_image_with_quality(source, mime_type, quality)


def compress_to_target_with_report(
    source: bytes,
    mime_type: str | None,
    max_size_bytes: int,
) -> CompressionResult:
    """Lower the quality until the output fits *max_size_bytes* or the floor is hit.

    The last attempt is returned even when it is still too large.
    """

    if max_size_bytes < 0:
        raise ValueError("max_size_bytes must not be negative")

    target = _source_format(source, mime_type)
    attempts = 0
    quality = START_QUALITY
    encoded = b""
    for quality, encoded in iter_quality_attempts(source, mime_type):
        attempts += 1
        LOGGER.debug("Attempt %d at quality %d produced %d bytes", attempts, quality, len(encoded))
        if len(encoded) <= max_size_bytes:
            break
    else:
        LOGGER.info(
            "Target of %d bytes not reached; returning %d bytes at quality floor %d",
            max_size_bytes,
            len(encoded),
            quality,
        )

    return CompressionResult(
        data=encoded,
        original_size=len(source),
        media_type=target.mime_type,
        quality=quality,
        attempts=attempts,
    )


def compress_to_target(source: bytes, mime_type: str | None, max_size_bytes: int) -> bytes:
    """Best-effort compression of *source* below *max_size_bytes*."""

    return compress_to_target_with_report(source, mime_type, max_size_bytes).data


def compress_image(
    source: bytes,
    mime_type: str | None = None,
    *,
    quality: float = QUICK_QUALITY,
    max_dimension: int | None = None,
) -> CompressionResult:
    """Downscale to the configured maximum and re-encode as JPEG.

    When the JPEG is not smaller than *source* the original bytes are
    returned unchanged.
    """

    if max_dimension is None:
        max_dimension = get_settings().max_dimension
    request = EncodeRequest(
        target_format=ImageFormat.JPEG.value,
        quality=quality,
        max_dimension=max_dimension,
    )
    encoded = transform(source, mime_type, request)
    if len(encoded) < len(source):
        LOGGER.info("Compressed image from %d to %d bytes", len(source), len(encoded))
        return CompressionResult(
            data=encoded,
            original_size=len(source),
            media_type=ImageFormat.JPEG.mime_type,
            quality=request.quality_percent,
        )

    LOGGER.info("Compressed image was not smaller (%d >= %d); keeping original", len(encoded), len(source))
    try:
        media_type = _source_format(source, mime_type).mime_type
    except (UnsupportedFormatError, DecodeError):
        media_type = normalize_mime_type(mime_type) if mime_type else "application/octet-stream"
    return CompressionResult(data=source, original_size=len(source), media_type=media_type, quality=None)


def calculate_compression_ratio(original_size: int, compressed_size: int) -> int:
    """Percentage saved, rounded to the nearest integer."""

    if original_size <= 0:
        return 0
    return round((original_size - compressed_size) / original_size * 100)


__all__ = [
    "compress_image_with_quality",
    "iter_quality_attempts",
    "compress_to_target",
    "compress_to_target_with_report",
    "compress_image",
    "calculate_compression_ratio",
]
