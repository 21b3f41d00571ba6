"""Plugin exposing image format conversion through the registry."""

from __future__ import annotations

from ...core.utils import get_logger
from ...imaging.transform import convert_image_format
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("docuforge.tools.convert_image")


@register_tool("convert-image")
class ConvertImageTool(BaseTool):
    def run(self) -> bytes:
        context = self.context
        target = context.config.get("format")
        if not target:
            raise ValueError("Image conversion requires a target format")
        LOGGER.debug("Converting image to %s", target)
        data = convert_image_format(
            context.load_source(),
            context.source_mime_type(),
            target,
            background_color=context.config.get("background"),
        )
        return context.store_output(data)
