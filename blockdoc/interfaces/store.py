"""Abstract base class for template storage strategies."""

from abc import ABC, abstractmethod
from typing import Any


class BaseTemplateStore(ABC):
    """Key-value store for template documents.

    Documents are plain mappings as produced by
    ``TemplateDocument.to_document``. Stores never parse them.
    """

    @abstractmethod
    def get(self, key: str) -> dict[str, Any]:
        """Fetch a document.

        Raises:
            NotFoundError: If the key is unknown.
        """

    @abstractmethod
    def put(self, key: str, document: dict[str, Any]) -> None:
        """Create or replace a document."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a document.

        Raises:
            NotFoundError: If the key is unknown.
        """

    @abstractmethod
    def query(self, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        """Return the documents whose attributes equal the given values.

        Dotted names reach nested keys, e.g.
        ``store.query(**{"layout.schemaVersion": "builder-v1"})``.

        Returns:
            ``(key, document)`` pairs ordered by key.
        """
