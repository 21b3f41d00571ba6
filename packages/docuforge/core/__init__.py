"""Core types, configuration and helpers shared by DocuForge engines."""

from .config import Settings, get_settings, reset_settings
from .exceptions import (
    DecodeError,
    DocuForgeError,
    DocumentFinalizedError,
    EncodeError,
    ExternalServiceError,
    InsufficientInputError,
    UnsupportedFormatError,
)
from .model import CompressionResult, EncodeRequest, ExtractionResult, RasterImage
from .utils import configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "DocuForgeError",
    "DecodeError",
    "EncodeError",
    "UnsupportedFormatError",
    "InsufficientInputError",
    "ExternalServiceError",
    "DocumentFinalizedError",
    "RasterImage",
    "EncodeRequest",
    "ExtractionResult",
    "CompressionResult",
    "configure_logging",
    "get_logger",
]
