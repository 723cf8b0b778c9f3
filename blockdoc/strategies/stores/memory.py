"""In-memory template store.

Keeps plain documents in a dict. Useful for tests and for hosts that
load templates once at startup.
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any

from blockdoc.core.errors import NotFoundError, ValidationError
from blockdoc.interfaces.store import BaseTemplateStore

logger = logging.getLogger(__name__)

_MISSING = object()


def _lookup(document: Mapping[str, Any], dotted_key: str) -> Any:
    """Follow a dotted key through nested mappings."""
    current: Any = document
    for part in dotted_key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


class InMemoryTemplateStore(BaseTemplateStore):
    """Dict-backed template store.

    Documents are deep-copied on the way in and on the way out, so callers
    never share mutable state with the store.
    """

    def __init__(self, documents: Mapping[str, dict[str, Any]] | None = None) -> None:
        """Initialize the store.

        Args:
            documents: Optional initial documents keyed by store key.
        """
        self._documents: dict[str, dict[str, Any]] = {}
        for key, document in (documents or {}).items():
            self.put(key, document)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, key: object) -> bool:
        return key in self._documents

    def get(self, key: str) -> dict[str, Any]:
        try:
            return copy.deepcopy(self._documents[key])
        except KeyError:
            raise NotFoundError(f"Template not found: {key}") from None

    def put(self, key: str, document: dict[str, Any]) -> None:
        if not key or not key.strip():
            raise ValidationError("Store key is required.")
        if not isinstance(document, Mapping):
            raise ValidationError(f"Expected a mapping for '{key}', got {type(document).__name__}")
        self._documents[key] = copy.deepcopy(dict(document))
        logger.debug(f"Stored template '{key}'")

    def delete(self, key: str) -> None:
        if key not in self._documents:
            raise NotFoundError(f"Template not found: {key}")
        del self._documents[key]
        logger.info(f"Deleted template '{key}'")

    def query(self, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        matches = [
            (key, copy.deepcopy(document))
            for key, document in sorted(self._documents.items())
            if all(_lookup(document, name) == expected for name, expected in equals.items())
        ]
        logger.debug(f"Query {equals} matched {len(matches)} template(s)")
        return matches
