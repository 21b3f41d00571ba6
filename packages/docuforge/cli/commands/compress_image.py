"""CLI helpers for compressing images."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("compress-image", help="Compress an image")
    parser.add_argument("input", help="Input image file")
    parser.add_argument("output", help="Destination for the compressed image")
    parser.add_argument(
        "--max-size",
        type=int,
        help="Target size in bytes; lowers quality step by step until it fits",
    )
    parser.add_argument("--quality", type=float, default=0.7, help="JPEG quality for quick compression")
    parser.add_argument("--max-dimension", type=int, help="Longest side after downscaling")
    parser.set_defaults(tool_name="compress-image", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "max_size": args.max_size,
            "quality": args.quality,
            "max_dimension": args.max_dimension,
        },
    )
