"""Core interfaces and context objects shared by DocuForge tools."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ...core.exceptions import InsufficientInputError
from ...pdf.office import DOCX_MIME_TYPE, XLSX_MIME_TYPE

_EXTENSION_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".gif": "image/gif",
    ".docx": DOCX_MIME_TYPE,
    ".xlsx": XLSX_MIME_TYPE,
}


def guess_mime_type(path: str | Path) -> str | None:
    suffix = Path(path).suffix.lower()
    if suffix in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[suffix]
    return mimetypes.guess_type(str(path))[0]


def _resolve(path: str | Path) -> Path:
    return Path(path).expanduser().resolve()


@dataclass
class ToolContext:
    """Holds the inputs, options and outputs of one tool invocation.

    Sources may be given as bytes (``source``/``sources``) or as paths
    (``input_path``/``inputs``); bytes win when both are present.
    """

    input_path: Path | None = None
    output_path: Path | None = None
    inputs: list[Path] = field(default_factory=list)
    source: bytes | None = None
    sources: list[bytes] = field(default_factory=list)
    mime_type: str | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.input_path is not None:
            self.input_path = _resolve(self.input_path)
        if self.output_path is not None:
            self.output_path = _resolve(self.output_path)
        self.inputs = [_resolve(path) for path in self.inputs]

    def load_source(self) -> bytes:
        if self.source is None:
            if self.input_path is None:
                raise InsufficientInputError("This tool requires an input file")
            self.source = self.input_path.read_bytes()
        return self.source

    def load_sources(self) -> list[bytes]:
        if not self.sources and self.inputs:
            self.sources = [path.read_bytes() for path in self.inputs]
        return self.sources

    def source_mime_type(self) -> str | None:
        if self.mime_type is None and self.input_path is not None:
            self.mime_type = guess_mime_type(self.input_path)
        return self.mime_type

    def store_output(self, data: bytes) -> bytes:
        self.resources["output"] = data
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_bytes(data)
        return data


class BaseTool:
    """Base class for all pluggable DocuForge tools."""

    name: str

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


ToolFactory = Callable[[ToolContext], BaseTool]
