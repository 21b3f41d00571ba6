"""Command line interface for DocuForge."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from ..core.config import get_settings
from ..core.exceptions import DocuForgeError
from ..core.model import CompressionResult, ExtractionResult
from ..core.utils import configure_logging, sizeof_fmt
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ToolContext
from ..tools.common.pipeline import registry
from .commands import (
    compress_image,
    compress_pdf,
    convert,
    convert_image,
    crop,
    extract,
    make,
    merge,
    passport,
)

COMMAND_MODULES = [
    compress_image,
    compress_pdf,
    convert_image,
    crop,
    passport,
    convert,
    merge,
    extract,
    make,
]


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docuforge", description="DocuForge CLI")
    parser.add_argument("--log-level", help="Override DOCUFORGE_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def _report(result: object, context: ToolContext) -> None:
    if isinstance(result, CompressionResult):
        print(
            f"{sizeof_fmt(result.original_size)} -> {sizeof_fmt(result.compressed_size)} "
            f"({result.percent_saved}% smaller)"
        )
    elif isinstance(result, ExtractionResult) and context.output_path is None:
        print(result.text or "")


def main(argv: Sequence[str] | None = None) -> object:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)

    context: ToolContext = args.build_context(args)
    try:
        result = registry.run(args.tool_name, context)
    except (DocuForgeError, ValueError, NotImplementedError, OSError) as exc:
        print(f"docuforge: error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    _report(result, context)
    return result


if __name__ == "__main__":  # pragma: no cover
    main()
