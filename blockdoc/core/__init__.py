"""Core configuration, errors and factory components."""

from blockdoc.core.config import Settings, get_settings
from blockdoc.core.errors import BlockdocError, IntegrityWarning, NotFoundError, ValidationError
from blockdoc.core.factory import ComponentFactory, get_factory

__all__ = [
    "Settings",
    "get_settings",
    "BlockdocError",
    "IntegrityWarning",
    "NotFoundError",
    "ValidationError",
    "ComponentFactory",
    "get_factory",
]
