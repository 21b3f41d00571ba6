"""Plugin exposing crop and scale through the registry."""

from __future__ import annotations

from ...imaging.formats import ImageFormat
from ...imaging.transform import crop_image
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool


@register_tool("crop")
class CropTool(BaseTool):
    def run(self) -> bytes:
        config = self.context.config
        box = config.get("box")
        data = crop_image(
            self.context.load_source(),
            self.context.source_mime_type(),
            box=tuple(box) if box is not None else None,
            scale=config.get("scale", 1.0),
            target_format=config.get("format") or ImageFormat.PNG,
            quality=config.get("quality", 1.0),
        )
        return self.context.store_output(data)
