"""Filled document renderer.

Expands every repeat into one subtree per list item, each evaluated
against its own item scope. This is the renderer used both for the live
preview of a filled document and for the exported document.
"""

import logging
from collections.abc import Mapping
from typing import Any

from blockdoc.core.config import Settings
from blockdoc.engine.scope import build_preview_values
from blockdoc.interfaces.renderer import BaseRenderer, RenderResult
from blockdoc.models.template import TemplateDocument
from blockdoc.strategies.renderers.markup import MarkupBuilder

logger = logging.getLogger(__name__)


class DocumentRenderer(BaseRenderer):
    """Renderer for filled documents.

    Example:
        ```python
        renderer = DocumentRenderer()
        result = renderer.render(template, {"exp": [{"role": "A", "company": "X"}]})
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fill_empty_repeats: bool = False,
    ) -> None:
        """Initialize the document renderer.

        Args:
            settings: Engine settings. If None, uses global settings.
            fill_empty_repeats: Show one placeholder item for repeats with
                no items, so an unfilled document still previews plausibly.
        """
        self._builder = MarkupBuilder(settings)
        self._fill_empty_repeats = fill_empty_repeats

    @property
    def expands_repeats(self) -> bool:
        return True

    def render(
        self,
        template: TemplateDocument,
        values: Mapping[str, Any] | None = None,
    ) -> RenderResult:
        if self._fill_empty_repeats:
            values = build_preview_values(template, values)
        logger.debug(f"Rendering document for {template.id}")
        return self._builder.build(template, values, expand_repeats=True)
