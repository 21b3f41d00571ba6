from __future__ import annotations

import io
from typing import Callable

import pytest
from PIL import Image

from docuforge.core.exceptions import DecodeError, UnsupportedFormatError
from docuforge.core.model import EncodeRequest, normalize_quality
from docuforge.imaging.filters import apply_tone, parse_color
from docuforge.imaging.formats import ImageFormat, resolve_format
from docuforge.imaging.transform import (
    convert_image_format,
    crop_image,
    decode_image,
    fit_within,
    transform,
)


def _open(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


@pytest.mark.parametrize(
    ("quality", "expected"),
    [(0.5, 50), (1.0, 100), (0.0, 0), (50, 50), (1, 1), (100, 100)],
)
def test_normalize_quality(quality: float, expected: int) -> None:
    assert normalize_quality(quality) == expected


@pytest.mark.parametrize("quality", [-0.1, 101, 150.0])
def test_normalize_quality_rejects_out_of_range(quality: float) -> None:
    with pytest.raises(ValueError):
        normalize_quality(quality)


def test_encode_request_validates_dimension() -> None:
    with pytest.raises(ValueError):
        EncodeRequest(target_format="png", max_dimension=0)


def test_resolve_format_aliases() -> None:
    assert resolve_format("image/jpg") is ImageFormat.JPEG
    assert resolve_format(".JPG") is ImageFormat.JPEG
    assert resolve_format("webp") is ImageFormat.WEBP
    with pytest.raises(UnsupportedFormatError):
        resolve_format("tiff")


def test_decode_rejects_mismatched_declared_type(png_bytes: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_image(png_bytes, "image/jpeg")


def test_decode_accepts_jpg_alias(jpeg_bytes: bytes) -> None:
    raster = decode_image(jpeg_bytes, "image/jpg")
    assert raster.source_format == "JPEG"
    assert (raster.width, raster.height) == (120, 80)


def test_decode_rejects_unsupported_type(png_bytes: bytes) -> None:
    with pytest.raises(UnsupportedFormatError):
        decode_image(png_bytes, "image/tiff")


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_decode_rejects_malformed_data(data: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_image(data, "image/png")


def test_decode_applies_exif_orientation() -> None:
    image = Image.new("RGB", (40, 20), (10, 120, 200))
    exif = Image.Exif()
    exif[0x0112] = 6
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", exif=exif)

    raster = decode_image(buffer.getvalue(), "image/jpeg")

    assert (raster.width, raster.height) == (20, 40)


@pytest.mark.parametrize(
    ("size", "max_dimension", "expected"),
    [
        ((400, 200), 100, (100, 50)),
        ((200, 400), 100, (50, 100)),
        ((80, 60), 100, (80, 60)),
        ((80, 60), None, (80, 60)),
    ],
)
def test_fit_within(size: tuple[int, int], max_dimension: int | None, expected: tuple[int, int]) -> None:
    assert fit_within(*size, max_dimension) == expected


def test_transform_downscales_and_encodes(image_factory: Callable[..., bytes]) -> None:
    source = image_factory("PNG", (400, 200))
    request = EncodeRequest(target_format="jpeg", quality=0.8, max_dimension=100)

    result = _open(transform(source, "image/png", request))

    assert result.format == "JPEG"
    assert result.size == (100, 50)


def test_transform_leaves_source_untouched(png_bytes: bytes) -> None:
    original = bytes(png_bytes)
    transform(png_bytes, "image/png", EncodeRequest(target_format="webp"))
    assert png_bytes == original


@pytest.mark.parametrize("mode", ["RGB", "RGBA", "L"])
def test_png_reencode_is_lossless(mode: str) -> None:
    source = Image.effect_noise((64, 48), 80).convert(mode)
    if mode == "RGBA":
        source.putalpha(Image.linear_gradient("L").resize(source.size))
    buffer = io.BytesIO()
    source.save(buffer, format="PNG")

    result = _open(transform(buffer.getvalue(), "image/png", EncodeRequest(target_format="png", quality=100)))

    assert result.mode == mode
    assert result.size == source.size
    assert result.tobytes() == source.tobytes()


def test_convert_to_jpeg_fills_transparency_with_white(transparent_png: bytes) -> None:
    result = _open(convert_image_format(transparent_png, "image/png", "jpeg"))

    assert result.mode == "RGB"
    assert all(channel >= 250 for channel in result.getpixel((20, 20)))


def test_convert_to_bmp_uses_background_color(transparent_png: bytes) -> None:
    result = _open(convert_image_format(transparent_png, "image/png", "bmp", background_color="#0000FF"))

    assert result.format == "BMP"
    assert result.getpixel((5, 5)) == (0, 0, 255)


def test_convert_to_png_keeps_alpha(transparent_png: bytes) -> None:
    result = _open(convert_image_format(transparent_png, "image/png", ImageFormat.PNG))

    assert result.mode == "RGBA"
    assert result.getpixel((0, 0))[3] == 0


def test_convert_accepts_gif_source(image_factory: Callable[..., bytes]) -> None:
    source = image_factory("GIF", (30, 30), mode="P", color=1)
    result = _open(convert_image_format(source, "image/gif", "png"))
    assert result.size == (30, 30)


def test_crop_and_scale(image_factory: Callable[..., bytes]) -> None:
    source = image_factory("PNG", (100, 100))

    result = _open(crop_image(source, "image/png", box=(10, 10, 30, 20), scale=2))

    assert result.format == "PNG"
    assert result.size == (40, 20)


@pytest.mark.parametrize("box", [(0, 0, 200, 10), (20, 0, 10, 10), (-1, 0, 5, 5)])
def test_crop_rejects_invalid_box(png_bytes: bytes, box: tuple[int, int, int, int]) -> None:
    with pytest.raises(ValueError):
        crop_image(png_bytes, "image/png", box=box)


def test_crop_rejects_non_positive_scale(png_bytes: bytes) -> None:
    with pytest.raises(ValueError):
        crop_image(png_bytes, "image/png", scale=0)


def test_parse_color() -> None:
    assert parse_color("#FF0000") == (255, 0, 0, 255)
    assert parse_color("white") == (255, 255, 255, 255)
    with pytest.raises(ValueError):
        parse_color("not-a-colour")


def test_apply_tone_zero_brightness_keeps_alpha() -> None:
    image = Image.new("RGBA", (2, 2), (200, 100, 50, 128))

    toned = apply_tone(image, brightness=0)

    assert toned.getpixel((0, 0)) == (0, 0, 0, 128)


def test_apply_tone_without_values_is_identity() -> None:
    image = Image.new("RGB", (2, 2), (1, 2, 3))
    assert apply_tone(image) is image


def test_apply_tone_contrast_pivots_on_midpoint() -> None:
    image = Image.new("L", (1, 1), 200)

    assert apply_tone(image, contrast=200).getpixel((0, 0)) == 255
    assert apply_tone(image, contrast=0).getpixel((0, 0)) == 128
