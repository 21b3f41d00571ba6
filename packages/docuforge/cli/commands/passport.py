"""CLI helpers for passport photos."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...imaging.passport import PASSPORT_SIZES
from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("passport", help="Create a passport photo")
    parser.add_argument("input", help="Input portrait")
    parser.add_argument("output", help="Output JPEG path")
    parser.add_argument(
        "--preset",
        choices=sorted(PASSPORT_SIZES),
        default="US Passport",
        help="Output size preset",
    )
    parser.add_argument("--width", type=int, help="Custom width in pixels")
    parser.add_argument("--height", type=int, help="Custom height in pixels")
    parser.add_argument("--background", help="Background colour, e.g. '#FFFFFF'")
    parser.add_argument("--brightness", type=float, help="Brightness percentage (100 = unchanged)")
    parser.add_argument("--contrast", type=float, help="Contrast percentage (100 = unchanged)")
    parser.add_argument(
        "--remove-background",
        action="store_true",
        help="Only replace the background on a 600x600 canvas",
    )
    parser.set_defaults(tool_name="passport", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "preset": args.preset,
            "width": args.width,
            "height": args.height,
            "background": args.background,
            "brightness": args.brightness,
            "contrast": args.contrast,
            "remove_background": args.remove_background,
        },
    )
