"""Passport photo compositor.

Fits a portrait into a fixed frame by covering it completely and centring
the overflow. There is no face detection: a subject that is off-centre in
the source stays off-centre in the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from .filters import apply_tone, parse_color
from .formats import ImageFormat
from .transform import DEFAULT_BACKGROUND, decode_image, encode_image

LOGGER = logging.getLogger("docuforge.imaging")

PASSPORT_JPEG_QUALITY = 0.95


@dataclass(frozen=True)
class PassportSize:
    width: int
    height: int
    unit: str


PASSPORT_SIZES: dict[str, PassportSize] = {
    "US Passport": PassportSize(600, 600, "2x2 inches"),
    "India Passport": PassportSize(600, 600, "2x2 inches"),
    "UK Passport": PassportSize(413, 531, "35x45 mm"),
    "EU Passport": PassportSize(413, 531, "35x45 mm"),
    "China Passport": PassportSize(390, 567, "33x48 mm"),
    "Custom": PassportSize(600, 600, "Custom"),
}


@dataclass(frozen=True)
class PassportPhotoOptions:
    width: int
    height: int
    background_color: str | None = None
    brightness: float | None = None
    contrast: float | None = None

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Passport photo dimensions must be positive")

    @classmethod
    def for_preset(cls, name: str, **overrides) -> "PassportPhotoOptions":
        try:
            size = PASSPORT_SIZES[name]
        except KeyError as exc:
            raise ValueError(f"Unknown passport preset: {name}") from exc
        return cls(width=size.width, height=size.height, **overrides)


@dataclass(frozen=True)
class Placement:
    """Where a scaled source lands on the frame; offsets may be negative."""

    scale: float
    width: float
    height: float
    x: float
    y: float


def cover_fit(image_width: int, image_height: int, frame_width: int, frame_height: int) -> Placement:
    """Scale so the image covers the frame, then centre it."""

    scale = max(frame_width / image_width, frame_height / image_height)
    scaled_width = image_width * scale
    scaled_height = image_height * scale
    return Placement(
        scale=scale,
        width=scaled_width,
        height=scaled_height,
        x=(frame_width - scaled_width) / 2,
        y=(frame_height - scaled_height) / 2,
    )


def compose(source: bytes, options: PassportPhotoOptions, source_mime_type: str | None = None) -> bytes:
    """Return a JPEG of exactly ``options.width`` x ``options.height``."""

    raster = decode_image(source, source_mime_type)
    placement = cover_fit(raster.width, raster.height, options.width, options.height)

    canvas = Image.new(
        "RGBA",
        (options.width, options.height),
        parse_color(options.background_color or DEFAULT_BACKGROUND),
    )

    scaled_size = (max(1, round(placement.width)), max(1, round(placement.height)))
    scaled = raster.pixels.convert("RGBA").resize(scaled_size, Image.Resampling.LANCZOS)
    scaled = apply_tone(scaled, options.brightness, options.contrast)

    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(scaled, (round(placement.x), round(placement.y)))
    canvas.alpha_composite(layer)

    LOGGER.debug(
        "Composed passport photo %sx%s from %sx%s (scale %.4f, offset %.1f,%.1f)",
        options.width,
        options.height,
        raster.width,
        raster.height,
        placement.scale,
        placement.x,
        placement.y,
    )
    return encode_image(canvas.convert("RGB"), ImageFormat.JPEG, PASSPORT_JPEG_QUALITY)


def remove_background(source: bytes, background_color: str, source_mime_type: str | None = None) -> bytes:
    """Compose onto a 600x600 solid background.

    The subject is not segmented; the colour only shows through transparent
    areas of the source.
    """

    options = PassportPhotoOptions(width=600, height=600, background_color=background_color)
    return compose(source, options, source_mime_type)


__all__ = [
    "PASSPORT_SIZES",
    "PassportSize",
    "PassportPhotoOptions",
    "Placement",
    "cover_fit",
    "compose",
    "remove_background",
]
