"""Shared value types passed between DocuForge engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from PIL import Image


def normalize_quality(quality: float) -> int:
    """Map *quality* onto the 0-100 encoder scale.

    Floats in ``[0.0, 1.0]`` are read as fractions, anything else as a
    percentage.
    """

    if isinstance(quality, float) and 0.0 <= quality <= 1.0:
        return round(quality * 100)
    if not 0 <= quality <= 100:
        raise ValueError(f"quality must be within [0, 100] or [0.0, 1.0], got {quality}")
    return round(quality)


@dataclass(slots=True)
class RasterImage:
    """A decoded pixel grid held in memory for the duration of one call."""

    pixels: Image.Image
    source_format: str | None = None

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height

    @property
    def mode(self) -> str:
        return self.pixels.mode

    @property
    def has_alpha(self) -> bool:
        return self.pixels.has_transparency_data


@dataclass(frozen=True, slots=True)
class EncodeRequest:
    """Immutable configuration for a single bitmap transform."""

    target_format: str
    quality: float = 0.92
    max_dimension: int | None = None
    background_color: str | None = None
    brightness: float | None = None
    contrast: float | None = None

    def __post_init__(self) -> None:
        normalize_quality(self.quality)
        if self.max_dimension is not None and self.max_dimension < 1:
            raise ValueError("max_dimension must be a positive integer")

    @property
    def quality_percent(self) -> int:
        """Quality on the 0-100 scale."""

        return normalize_quality(self.quality)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of a PDF extraction call."""

    page_count: int
    text: str | None = None
    images: tuple[bytes, ...] | None = None
    info: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class CompressionResult:
    """Represents the outcome of a compression run."""

    data: bytes
    original_size: int
    media_type: str
    quality: int | None = None
    attempts: int = 1

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size

    @property
    def percent_saved(self) -> int:
        if self.original_size == 0:
            return 0
        return round((self.original_size - self.compressed_size) / self.original_size * 100)


__all__ = ["normalize_quality", "RasterImage", "EncodeRequest", "ExtractionResult", "CompressionResult"]
