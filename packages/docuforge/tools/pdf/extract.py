"""Plugin exposing text extraction through the registry."""

from __future__ import annotations

from ...core.model import ExtractionResult
from ...pdf.extract import extract
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool


@register_tool("extract")
class ExtractTool(BaseTool):
    def run(self) -> ExtractionResult:
        context = self.context
        result = extract(
            context.load_source(),
            want_text=context.config.get("text", True),
            want_images=context.config.get("images", False),
            extractor=context.resources.get("extractor"),
        )
        if result.text is not None:
            context.store_output(result.text.encode("utf-8"))
        context.resources["result"] = result
        return result
