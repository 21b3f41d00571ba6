"""CLI helpers for converting files to PDF."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("convert", help="Convert an image, .docx or .xlsx file to PDF")
    parser.add_argument("input", help="Input file")
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument(
        "--type",
        dest="file_type",
        help="image, word, excel or a MIME type; guessed from the extension when omitted",
    )
    parser.set_defaults(tool_name="convert", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.input,
        output_path=args.output,
        config={"file_type": args.file_type},
    )
