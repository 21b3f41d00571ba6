"""Pixel filters shared by the bitmap engines."""

from __future__ import annotations

from PIL import Image, ImageColor

_TONE_MODES = {"RGB", "RGBA", "L", "LA"}


def parse_color(value: str) -> tuple[int, int, int, int]:
    """Parse a CSS-style colour string into an RGBA tuple."""

    try:
        return ImageColor.getcolor(value, "RGBA")
    except ValueError as exc:
        raise ValueError(f"Invalid colour value: {value!r}") from exc


def _tone_table(brightness: float, contrast: float) -> list[int]:
    # brightness then contrast, each clamped to 0-255 before the next step.
    gain = brightness / 100.0
    slope = contrast / 100.0
    table = []
    for value in range(256):
        lit = min(max(value * gain, 0.0), 255.0)
        adjusted = (lit - 127.5) * slope + 127.5
        table.append(int(round(min(max(adjusted, 0.0), 255.0))))
    return table


def apply_tone(
    image: Image.Image,
    brightness: float | None = None,
    contrast: float | None = None,
) -> Image.Image:
    """Apply percentage brightness and contrast, 100 meaning unchanged.

    Values are not validated; anything the arithmetic accepts is applied.
    """

    if brightness is None and contrast is None:
        return image

    table = _tone_table(
        100.0 if brightness is None else float(brightness),
        100.0 if contrast is None else float(contrast),
    )
    if image.mode not in _TONE_MODES:
        image = image.convert("RGBA" if image.has_transparency_data else "RGB")

    lut: list[int] = []
    for band in image.getbands():
        lut.extend(range(256) if band == "A" else table)
    return image.point(lut)


__all__ = ["parse_color", "apply_tone"]
