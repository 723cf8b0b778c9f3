"""Builder preview renderer.

Used while the template is being edited. Leaves show their bound values
when any are supplied and fall back to placeholders otherwise. Repeats
are not expanded; each shows a neutral labelled block.
"""

import logging
from collections.abc import Mapping
from typing import Any

from blockdoc.core.config import Settings
from blockdoc.interfaces.renderer import BaseRenderer, RenderResult
from blockdoc.models.template import TemplateDocument
from blockdoc.strategies.renderers.markup import MarkupBuilder

logger = logging.getLogger(__name__)


class PreviewRenderer(BaseRenderer):
    """Renderer for the template builder canvas."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the preview renderer.

        Args:
            settings: Engine settings. If None, uses global settings.
        """
        self._builder = MarkupBuilder(settings)

    @property
    def expands_repeats(self) -> bool:
        return False

    def render(
        self,
        template: TemplateDocument,
        values: Mapping[str, Any] | None = None,
    ) -> RenderResult:
        logger.debug(f"Rendering builder preview for {template.id}")
        return self._builder.build(template, values, expand_repeats=False)
