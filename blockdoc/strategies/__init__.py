"""Concrete strategy implementations."""

from blockdoc.strategies.renderers import (
    DocumentRenderer,
    PreviewRenderer,
)
from blockdoc.strategies.stores import (
    InMemoryTemplateStore,
)

__all__ = [
    "DocumentRenderer",
    "PreviewRenderer",
    "InMemoryTemplateStore",
]
