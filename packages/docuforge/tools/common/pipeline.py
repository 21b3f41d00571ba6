"""Plugin registry for DocuForge tools.

Tools register themselves under a command-style name (``compress-pdf``,
``passport``) with :func:`register_tool`; the CLI and the package-level
helpers look them up here and run them against a :class:`ToolContext`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

from ...core.utils import get_logger
from .interfaces import BaseTool, ToolContext, ToolFactory

LOGGER = get_logger("docuforge.tools")


class ToolRegistry:
    """Maps tool names to :class:`BaseTool` subclasses."""

    def __init__(self) -> None:
        self._tools: Dict[str, type[BaseTool]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def register(self, name: str, tool_class: type[BaseTool]) -> None:
        if not (isinstance(tool_class, type) and issubclass(tool_class, BaseTool)):
            raise TypeError(f"Tool '{name}' must subclass BaseTool")
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = tool_class

    def get(self, name: str) -> type[BaseTool] | None:
        return self._tools.get(name)

    def names(self) -> Iterable[str]:
        return sorted(self._tools)

    def create(self, name: str, context: ToolContext) -> BaseTool:
        try:
            tool_class = self._tools[name]
        except KeyError as exc:
            raise KeyError(f"Tool '{name}' is not registered") from exc
        return tool_class(context)

    def run(self, name: str, context: ToolContext) -> Any:
        """Create tool *name* for *context*, run it and return its result."""

        tool = self.create(name, context)
        LOGGER.debug("Running tool %s", name)
        result = tool.run()
        if context.output_path is not None:
            LOGGER.info("Tool %s wrote %s", name, context.output_path)
        return result


registry = ToolRegistry()


def register_tool(name: str):
    """Class decorator adding a tool to the global :data:`registry`."""

    def decorator(cls: type[BaseTool]) -> type[BaseTool]:
        registry.register(name, cls)
        cls.name = name
        return cls

    return decorator


__all__ = ["ToolRegistry", "registry", "register_tool", "ToolContext", "BaseTool", "ToolFactory"]
