"""Abstract base classes for rendering and storage strategies."""

from blockdoc.interfaces.renderer import BaseRenderer, RenderResult
from blockdoc.interfaces.store import BaseTemplateStore

__all__ = [
    "BaseRenderer",
    "RenderResult",
    "BaseTemplateStore",
]
