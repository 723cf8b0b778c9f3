"""Template document models."""

from blockdoc.models.fields import FieldDefinition, InputKind
from blockdoc.models.nodes import (
    NODE_TYPES,
    ROOT_ID,
    ColumnNode,
    ContainerNode,
    Node,
    RepeatNode,
    RowNode,
    SectionNode,
    TextNode,
    TextStyleOverride,
)
from blockdoc.models.template import (
    Layout,
    TemplateDocument,
    apply_template_overrides,
    check_schema_version,
    create_empty_template,
    hydrate_template,
)
from blockdoc.models.theme import DividerStyle, Fonts, Page, PageBorder, Theme, TitleStyle

__all__ = [
    "FieldDefinition",
    "InputKind",
    "NODE_TYPES",
    "ROOT_ID",
    "ColumnNode",
    "ContainerNode",
    "Node",
    "RepeatNode",
    "RowNode",
    "SectionNode",
    "TextNode",
    "TextStyleOverride",
    "Layout",
    "TemplateDocument",
    "apply_template_overrides",
    "check_schema_version",
    "create_empty_template",
    "hydrate_template",
    "DividerStyle",
    "Fonts",
    "Page",
    "PageBorder",
    "Theme",
    "TitleStyle",
]
