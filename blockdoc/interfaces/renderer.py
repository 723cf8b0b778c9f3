"""Abstract base class for rendering strategies.

The Strategy Pattern lets the builder preview and the filled document
share one projection while differing in how repeats are shown.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from blockdoc.models.template import TemplateDocument


@dataclass(frozen=True)
class RenderResult:
    """Output of a render pass.

    Attributes:
        markup: The page element with the rendered tree inside it.
        stylesheet: CSS for the page shell and the shared classes.
        html: Standalone HTML document with the stylesheet inlined.
    """

    markup: str
    stylesheet: str
    html: str


class BaseRenderer(ABC):
    """Abstract base class for renderers.

    Renderers are deterministic: the same template and values always
    produce the same output.

    Example:
        ```python
        class PlainRenderer(BaseRenderer):
            def render(self, template, values=None) -> RenderResult:
                ...
        ```
    """

    @abstractmethod
    def render(
        self,
        template: TemplateDocument,
        values: Mapping[str, Any] | None = None,
    ) -> RenderResult:
        """Render a template against a value object.

        Args:
            template: Template to render.
            values: Value object; None renders the bare template.

        Returns:
            RenderResult with markup and stylesheet.
        """

    @property
    @abstractmethod
    def expands_repeats(self) -> bool:
        """Whether repeats are expanded into one subtree per item."""
