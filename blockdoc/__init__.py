"""Block-based document template engine.

Templates are trees of typed layout nodes bound to a registry of named
fields. The engine edits them through pure operations and renders them,
together with a value object, to self-contained HTML.
"""

from blockdoc.core import (
    BlockdocError,
    ComponentFactory,
    IntegrityWarning,
    NotFoundError,
    Settings,
    ValidationError,
    get_factory,
    get_settings,
)
from blockdoc.interfaces import BaseRenderer, BaseTemplateStore, RenderResult
from blockdoc.models import TemplateDocument, create_empty_template, hydrate_template
from blockdoc.strategies import DocumentRenderer, InMemoryTemplateStore, PreviewRenderer

__version__ = "0.1.0"

__all__ = [
    "BlockdocError",
    "ComponentFactory",
    "IntegrityWarning",
    "NotFoundError",
    "Settings",
    "ValidationError",
    "get_factory",
    "get_settings",
    "BaseRenderer",
    "BaseTemplateStore",
    "RenderResult",
    "TemplateDocument",
    "create_empty_template",
    "hydrate_template",
    "DocumentRenderer",
    "InMemoryTemplateStore",
    "PreviewRenderer",
]
