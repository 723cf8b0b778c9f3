"""Concrete template store implementations."""

from blockdoc.strategies.stores.memory import InMemoryTemplateStore

__all__ = [
    "InMemoryTemplateStore",
]
