"""Namespace for pluggable DocuForge tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .imaging import compress, convert, crop, passport  # noqa: F401
    from .pdf import compress as compress_pdf, convert as convert_pdf, extract, make, merge  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
