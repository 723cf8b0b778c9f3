"""Concrete renderer implementations."""

from blockdoc.strategies.renderers.document import DocumentRenderer
from blockdoc.strategies.renderers.markup import MarkupBuilder
from blockdoc.strategies.renderers.preview import PreviewRenderer

__all__ = [
    "DocumentRenderer",
    "MarkupBuilder",
    "PreviewRenderer",
]
