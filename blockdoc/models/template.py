"""Template document model.

The template document is the unit of persistence: page setup, theme,
field registry and layout tree. The engine only ever transforms
in-memory copies; the external store owns its lifecycle.
"""

import logging
import uuid
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from blockdoc.core.config import Settings, get_settings
from blockdoc.core.errors import ValidationError, format_pydantic_errors
from blockdoc.models.fields import FieldDefinition
from blockdoc.models.nodes import ROOT_ID, ColumnNode, ContainerNode, Node, RepeatNode
from blockdoc.models.theme import Page, Theme

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_VERSION = "builder-v1"


def _walk(node: Any) -> Iterator[Any]:
    yield node
    for child in getattr(node, "children", ()):
        yield from _walk(child)


class Layout(BaseModel):
    """Wrapper around the root node of the layout tree."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    root: Node = Field(default_factory=lambda: ColumnNode(id=ROOT_ID, spacing=12))

    @model_validator(mode="after")
    def check_tree(self) -> "Layout":
        """Enforce the reserved root id and unique node ids."""
        if self.root.id != ROOT_ID:
            raise ValueError(f"root node must have id '{ROOT_ID}', got '{self.root.id}'")
        if not isinstance(self.root, ContainerNode) or isinstance(self.root, RepeatNode):
            raise ValueError("root node must be a section, row or column")

        seen: set[str] = set()
        for node in _walk(self.root):
            if node.id in seen:
                raise ValueError(f"duplicate node id '{node.id}'")
            seen.add(node.id)
        return self


class TemplateDocument(BaseModel):
    """A reusable layout document: page, theme, fields and layout tree."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=lambda: f"TMP_{uuid.uuid4().hex[:12]}")
    schema_version: str = DEFAULT_SCHEMA_VERSION
    version: str = "1.0"
    page: Page = Field(default_factory=Page)
    theme: Theme = Field(default_factory=Theme)
    fields: dict[str, FieldDefinition] = Field(default_factory=dict)
    layout: Layout = Field(default_factory=Layout)

    @property
    def root(self) -> Node:
        return self.layout.root

    def with_root(self, root: Node) -> "TemplateDocument":
        """Return a copy of this template with a new layout root.

        Raises:
            ValidationError: If the new tree breaks a layout invariant.
        """
        try:
            layout = Layout(root=root)
        except PydanticValidationError as e:
            raise ValidationError("Invalid layout tree", format_pydantic_errors(e)) from e
        return self.model_copy(update={"layout": layout})

    def with_fields(self, fields: Mapping[str, FieldDefinition]) -> "TemplateDocument":
        """Return a copy of this template with a new field registry."""
        return self.model_copy(update={"fields": dict(fields)})

    def to_document(self) -> dict[str, Any]:
        """Serialize to a plain, store-ready mapping with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=False)

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "TemplateDocument":
        """Parse a stored document.

        Raises:
            ValidationError: If the document does not match the model.
        """
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as e:
            details = format_pydantic_errors(e)
            logger.warning(f"Rejected template document: {len(details)} problem(s)")
            raise ValidationError("Invalid template document", details) from e


def create_empty_template(
    template_id: str | None = None,
    settings: Settings | None = None,
) -> TemplateDocument:
    """Create a template with default page, theme and an empty root column.

    Args:
        template_id: Id to use. A random ``TMP_`` id is generated if None.
        settings: Settings providing the schema version. If None, uses global settings.

    Returns:
        A new TemplateDocument.
    """
    settings = settings or get_settings()
    data: dict[str, Any] = {"schema_version": settings.schema_version}
    if template_id is not None:
        data["id"] = template_id
    return TemplateDocument(**data)


def _section(data: Mapping[str, Any], key: str, where: str = "document") -> dict[str, Any]:
    """Return ``data[key]`` as a dict; a missing or null entry is empty.

    Raises:
        ValidationError: If the entry is present but not a mapping.
    """
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(
            f"Invalid template {where}",
            [f"{key}: expected an object, got {type(value).__name__}"],
        )
    return dict(value)


def _require_mapping(data: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError(f"Invalid template {where}: expected an object, got {type(data).__name__}")
    return data


def hydrate_template(
    raw: Mapping[str, Any] | None,
    settings: Settings | None = None,
) -> TemplateDocument:
    """Merge a stored document over the default template.

    Page, theme and fields are merged key by key; the layout is taken
    from the document only when it has a root.

    Raises:
        ValidationError: If the document or one of its sections is not an
            object, or if the merged document is invalid.
    """
    base = create_empty_template(settings=settings).to_document()
    raw = dict(_require_mapping(raw or {}, "document"))

    merged = {**base, **raw}
    for key in ("page", "theme", "fields"):
        merged[key] = {**base[key], **_section(raw, key)}
    layout = _section(raw, "layout")
    merged["layout"] = layout if layout.get("root") else base["layout"]

    return TemplateDocument.from_document(merged)


def apply_template_overrides(
    template: TemplateDocument,
    overrides: Mapping[str, Any] | None,
) -> TemplateDocument:
    """Apply page and theme overrides, merging nested fonts and colors.

    Raises:
        ValidationError: If the overrides are not objects or produce an
            invalid template.
    """
    if not overrides:
        return template
    overrides = _require_mapping(overrides, "overrides")

    document = template.to_document()
    page_overrides = _section(overrides, "page", "overrides")
    if page_overrides:
        document["page"] = {**document["page"], **page_overrides}

    theme_overrides = _section(overrides, "theme", "overrides")
    if theme_overrides:
        theme = {**document["theme"], **theme_overrides}
        for nested in ("fonts", "colors"):
            nested_overrides = _section(theme_overrides, nested, "overrides")
            theme[nested] = {**(document["theme"].get(nested) or {}), **nested_overrides}
        document["theme"] = theme

    return TemplateDocument.from_document(document)


def check_schema_version(
    raw: Mapping[str, Any],
    settings: Settings | None = None,
) -> None:
    """Reject documents written for another schema.

    Hosts call this before handing a stored document to the engine.

    Raises:
        ValidationError: If the document is not an object, or if
            ``schemaVersion`` is missing or unrecognized.
    """
    settings = settings or get_settings()
    raw = _require_mapping(raw, "document")
    version = raw.get("schemaVersion", raw.get("schema_version"))
    if version != settings.schema_version:
        raise ValidationError(
            f"Unsupported template schema version: {version!r} "
            f"(expected {settings.schema_version!r})"
        )
