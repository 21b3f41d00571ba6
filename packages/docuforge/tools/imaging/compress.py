"""Plugins exposing image compression through the registry."""

from __future__ import annotations

from ...core.model import CompressionResult
from ...core.utils import get_logger
from ...imaging.compress import QUICK_QUALITY, compress_image, compress_to_target_with_report
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("docuforge.tools.compress_image")


@register_tool("compress-image")
class CompressImageTool(BaseTool):
    """Quick JPEG compression, or best-effort compression to ``max_size``."""

    def run(self) -> CompressionResult:
        context = self.context
        source = context.load_source()
        mime_type = context.source_mime_type()
        max_size = context.config.get("max_size")

        if max_size is not None:
            LOGGER.debug("Compressing image below %s bytes", max_size)
            result = compress_to_target_with_report(source, mime_type, int(max_size))
        else:
            result = compress_image(
                source,
                mime_type,
                quality=context.config.get("quality", QUICK_QUALITY),
                max_dimension=context.config.get("max_dimension"),
            )
        context.store_output(result.data)
        context.resources["result"] = result
        return result
