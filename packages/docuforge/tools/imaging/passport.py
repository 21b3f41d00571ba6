"""Plugin exposing the passport photo compositor through the registry."""

from __future__ import annotations

from ...imaging.passport import PassportPhotoOptions, compose, remove_background
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool


@register_tool("passport")
class PassportTool(BaseTool):
    """Compose a passport photo from a preset or explicit ``width``/``height``."""

    def _options(self) -> PassportPhotoOptions:
        config = self.context.config
        tone = {
            "background_color": config.get("background"),
            "brightness": config.get("brightness"),
            "contrast": config.get("contrast"),
        }
        if config.get("width") and config.get("height"):
            return PassportPhotoOptions(width=int(config["width"]), height=int(config["height"]), **tone)
        return PassportPhotoOptions.for_preset(config.get("preset") or "US Passport", **tone)

    def run(self) -> bytes:
        context = self.context
        source = context.load_source()
        if context.config.get("remove_background"):
            data = remove_background(
                source,
                context.config.get("background") or "#FFFFFF",
                context.source_mime_type(),
            )
        else:
            data = compose(source, self._options(), context.source_mime_type())
        return context.store_output(data)
