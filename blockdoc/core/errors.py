"""Error taxonomy for the template engine.

Structural problems are raised synchronously at the point of mutation.
Integrity issues that the author may accept are reported as warnings
instead of being raised.
"""


class BlockdocError(Exception):
    """Base class for all engine errors."""


class ValidationError(BlockdocError, ValueError):
    """Raised when a mutation request or document is malformed.

    Attributes:
        details: Optional list of individual problems (e.g. pydantic errors).
    """

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class NotFoundError(BlockdocError, LookupError):
    """Raised when a node, field, repeat item or store key does not exist."""


class IntegrityWarning(UserWarning):
    """Non-fatal signal that a field change affects live bindings.

    Returned to the host so it can ask the author for confirmation. The
    engine never raises it.

    Attributes:
        field_id: The field being renamed or removed.
        node_ids: Ids of the nodes currently bound to that field.
    """

    def __init__(self, field_id: str, node_ids: list[str]) -> None:
        self.field_id = field_id
        self.node_ids = list(node_ids)
        super().__init__(
            f"Field '{field_id}' is bound by {len(self.node_ids)} node(s): "
            f"{', '.join(self.node_ids)}"
        )


def format_pydantic_errors(exc: Exception) -> list[str]:
    """Flatten a pydantic ValidationError into readable strings."""
    errors = getattr(exc, "errors", None)
    if errors is None:
        return [str(exc)]
    details = []
    for error in errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg', '')}" if location else error.get("msg", ""))
    return details
