"""Plugin exposing PDF compression through the registry."""

from __future__ import annotations

from ...core.model import CompressionResult
from ...core.utils import get_logger
from ...pdf.compress import compress_pdf_simple
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("docuforge.tools.compress_pdf")


@register_tool("compress-pdf")
class CompressPdfTool(BaseTool):
    def run(self) -> CompressionResult:
        context = self.context
        LOGGER.debug("Compressing PDF %s", context.input_path or "<bytes>")
        result = compress_pdf_simple(
            context.load_source(),
            use_external=context.config.get("use_qpdf"),
        )
        context.store_output(result.data)
        context.resources["result"] = result
        return result
