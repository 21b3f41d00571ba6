"""Raster image engines: transform, passport compositing and compression."""

from __future__ import annotations

from .compress import (
    calculate_compression_ratio,
    compress_image,
    compress_image_with_quality,
    compress_to_target,
    compress_to_target_with_report,
    iter_quality_attempts,
)
from .filters import apply_tone, parse_color
from .formats import ImageFormat, normalize_mime_type, resolve_format
from .passport import (
    PASSPORT_SIZES,
    PassportPhotoOptions,
    PassportSize,
    Placement,
    compose,
    cover_fit,
    remove_background,
)
from .transform import (
    convert_image_format,
    crop_image,
    decode_image,
    encode_image,
    fit_within,
    transform,
)

__all__ = [
    "ImageFormat",
    "normalize_mime_type",
    "resolve_format",
    "apply_tone",
    "parse_color",
    "decode_image",
    "encode_image",
    "fit_within",
    "transform",
    "convert_image_format",
    "crop_image",
    "PASSPORT_SIZES",
    "PassportPhotoOptions",
    "PassportSize",
    "Placement",
    "compose",
    "cover_fit",
    "remove_background",
    "compress_image",
    "compress_image_with_quality",
    "compress_to_target",
    "compress_to_target_with_report",
    "iter_quality_attempts",
    "calculate_compression_ratio",
]
