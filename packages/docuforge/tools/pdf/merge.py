"""Plugin exposing PDF merge capabilities through the registry."""

from __future__ import annotations

from typing import Mapping, Sequence

from ...core.utils import get_logger
from ...pdf.merge import MergeJob
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("docuforge.tools.merge")


@register_tool("merge")
class MergeTool(BaseTool):
    def run(self) -> bytes:
        context = self.context
        sources = context.load_sources()
        names = [path.stem for path in context.inputs] if context.inputs else []
        bookmarks: Sequence[str] | None = context.config.get("bookmarks")
        document_info: Mapping[str, object] | None = context.config.get("document_info")

        job = MergeJob(min_sources=context.config.get("min_sources", 2))
        for index, data in enumerate(sources):
            title = bookmarks[index] if bookmarks and index < len(bookmarks) else None
            job.add(data, title or (names[index] if index < len(names) else None))

        LOGGER.debug("Merging %d input(s)", len(sources))
        data = job.run(
            metadata=context.config.get("metadata", True),
            document_info=document_info,
            with_bookmarks=bool(bookmarks) or context.config.get("with_bookmarks", False),
        )
        return context.store_output(data)
