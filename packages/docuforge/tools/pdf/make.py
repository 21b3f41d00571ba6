"""Plugin rendering the built-in document templates."""

from __future__ import annotations

import json

from ...pdf.templates import render_template
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool


@register_tool("make")
class MakeTool(BaseTool):
    """Render ``config["template"]`` from a JSON payload or a mapping."""

    def run(self) -> bytes:
        context = self.context
        payload = context.config.get("payload")
        if payload is None:
            payload = json.loads(context.load_source().decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("Template data must be a JSON object")
        return context.store_output(render_template(context.config["template"], payload))
