"""CLI helpers for compressing PDF files."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("compress-pdf", help="Strip metadata and recompress a PDF")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Destination for compressed PDF")
    parser.add_argument(
        "--no-qpdf",
        action="store_true",
        help="Skip the external qpdf pass even when qpdf is installed",
    )
    parser.set_defaults(tool_name="compress-pdf", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"use_qpdf": False if args.no_qpdf else None},
    )
