"""Component Factory for strategy instantiation.

The Factory Pattern lets the host pick a renderer and a template store
at runtime based on configuration or environment variables.
"""

import logging

from blockdoc.core.config import Settings, get_settings
from blockdoc.interfaces.renderer import BaseRenderer
from blockdoc.interfaces.store import BaseTemplateStore
from blockdoc.strategies.renderers import DocumentRenderer, PreviewRenderer
from blockdoc.strategies.stores import InMemoryTemplateStore

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        renderer = factory.get_renderer()
        store = factory.get_store()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Engine settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._renderer_cache: BaseRenderer | None = None
        self._store_cache: BaseTemplateStore | None = None

    def get_renderer(self, renderer_type: str | None = None) -> BaseRenderer:
        """Get a renderer instance based on the specified type.

        Args:
            renderer_type: ``preview`` or ``document``. If None, uses settings.

        Returns:
            A BaseRenderer implementation instance.

        Raises:
            ValueError: If the renderer type is unknown.
        """
        if self._renderer_cache is None or renderer_type is not None:
            renderer_type = renderer_type or self._settings.renderer_type

            logger.info(f"Instantiating renderer: {renderer_type}")

            match renderer_type:
                case "preview":
                    self._renderer_cache = PreviewRenderer(self._settings)
                case "document":
                    self._renderer_cache = DocumentRenderer(self._settings)
                case _:
                    raise ValueError(
                        f"Unknown renderer type: {renderer_type}. "
                        f"Valid options: 'preview', 'document'"
                    )

        return self._renderer_cache

    def get_store(self, store_type: str | None = None) -> BaseTemplateStore:
        """Get a template store instance based on the specified type.

        The store is kept across calls so documents put through it stay
        visible to later callers.

        Args:
            store_type: The store type to instantiate. If None, uses settings.

        Returns:
            A BaseTemplateStore implementation instance.

        Raises:
            ValueError: If the store type is unknown.
        """
        if self._store_cache is None or store_type is not None:
            store_type = store_type or self._settings.store_type

            logger.info(f"Instantiating template store: {store_type}")

            match store_type:
                case "memory":
                    self._store_cache = InMemoryTemplateStore()
                case _:
                    raise ValueError(
                        f"Unknown store type: {store_type}. "
                        f"Valid options: 'memory'"
                    )

        return self._store_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._renderer_cache = None
        self._store_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
