"""CLI helpers for extracting text from PDFs."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("extract", help="Extract the text of a PDF")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", nargs="?", help="Text file to write; prints to stdout when omitted")
    parser.set_defaults(tool_name="extract", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(input_path=args.input, output_path=args.output)
