"""CLI helpers for rendering document templates."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...pdf.templates import TEMPLATES
from ...tools.common.interfaces import ToolContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("make", help="Render an invoice, certificate or resume")
    parser.add_argument("template", choices=sorted(TEMPLATES), help="Template name")
    parser.add_argument("data", help="JSON file with the template fields")
    parser.add_argument("output", help="Output PDF path")
    parser.set_defaults(tool_name="make", build_context=_build_context)


def _build_context(args) -> ToolContext:
    return ToolContext(
        input_path=args.data,
        output_path=args.output,
        config={"template": args.template},
    )
