"""CLI helpers for cropping and scaling images."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...imaging.formats import ImageFormat
from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("crop", help="Crop and scale an image")
    parser.add_argument("input", help="Input image file")
    parser.add_argument("output", help="Output image path")
    parser.add_argument(
        "--box",
        type=int,
        nargs=4,
        metavar=("LEFT", "TOP", "RIGHT", "BOTTOM"),
        help="Crop rectangle in pixels",
    )
    parser.add_argument("--scale", type=float, default=1.0, help="Uniform scale factor")
    parser.add_argument(
        "--format",
        choices=[item.value for item in ImageFormat],
        default=ImageFormat.PNG.value,
        help="Output format",
    )
    parser.set_defaults(tool_name="crop", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"box": args.box, "scale": args.scale, "format": args.format},
    )
