"""CLI helpers for converting between image formats."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...imaging.formats import ImageFormat
from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("convert-image", help="Convert an image to another format")
    parser.add_argument("input", help="Input image file")
    parser.add_argument("output", help="Output image path")
    parser.add_argument(
        "--format",
        choices=[item.value for item in ImageFormat],
        required=True,
        help="Target image format",
    )
    parser.add_argument("--background", help="Fill colour for formats without transparency")
    parser.set_defaults(tool_name="convert-image", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"format": args.format, "background": args.background},
    )
