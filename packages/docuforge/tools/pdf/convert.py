"""Plugin converting images and office documents to PDF."""

from __future__ import annotations

from ...core.exceptions import UnsupportedFormatError
from ...pdf.office import convert_to_pdf, resolve_conversion_type
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool


@register_tool("convert")
class ConvertToPdfTool(BaseTool):
    def run(self) -> bytes:
        context = self.context
        source = context.load_source()
        mime_type = resolve_conversion_type(context.config.get("file_type"), context.source_mime_type())
        if not mime_type:
            raise UnsupportedFormatError("Cannot determine the type of the input file")
        return context.store_output(convert_to_pdf(source, mime_type))
