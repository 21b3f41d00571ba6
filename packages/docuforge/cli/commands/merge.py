"""CLI helpers for merging PDFs."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("merge", help="Merge multiple PDFs into one")
    parser.add_argument("inputs", nargs="+", help="Input PDF files")
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument(
        "--bookmark",
        dest="bookmarks",
        action="append",
        help="Add bookmark titles matching each input",
    )
    parser.add_argument(
        "--bookmarks-from-names",
        action="store_true",
        help="Add one bookmark per input named after its file",
    )
    parser.add_argument(
        "--no-metadata",
        action="store_true",
        help="Do not copy metadata from the first document",
    )
    parser.add_argument("--title", help="Title of the merged document")
    parser.add_argument("--author", help="Author of the merged document")
    parser.set_defaults(tool_name="merge", build_context=_build_context)


def _build_context(args) -> ToolContext:
    document_info = {"title": args.title, "author": args.author}
    return ToolContext(
        inputs=args.inputs,
        output_path=args.output,
        config={
            "bookmarks": args.bookmarks,
            "with_bookmarks": args.bookmarks_from_names,
            "metadata": not args.no_metadata,
            "document_info": document_info if any(document_info.values()) else None,
        },
    )
