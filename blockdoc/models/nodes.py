"""Layout node variants.

The layout is a rooted tree of typed nodes. Each node kind is its own
model with only the attributes that make sense for it, and the ``type``
key discriminates between them when parsing documents.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from blockdoc.models.theme import DividerStyle, SizeToken

ROOT_ID = "root"

LEAF_TYPES: frozenset[str] = frozenset({"text", "bullet-list", "chip-list"})
CONTAINER_TYPES: frozenset[str] = frozenset({"section", "row", "column", "repeat"})
NODE_TYPES: tuple[str, ...] = ("row", "column", "section", "text", "bullet-list", "chip-list", "repeat")

TextAlign = Literal["left", "center", "right", "justify"]
FontStyle = Literal["normal", "italic"]
TextTransform = Literal["none", "uppercase", "lowercase", "capitalize"]


# -----------------------------------------------------------------------------
# Node Base (shared fields for all nodes)
# -----------------------------------------------------------------------------


class NodeBase(BaseModel):
    """Base fields shared by all nodes."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(description="Unique node identifier, stable across edits")

    @field_validator("id")
    @classmethod
    def non_blank_id(cls, v: str) -> str:
        """Reject empty or whitespace-only ids."""
        if not v.strip():
            raise ValueError("node id must not be empty")
        return v

    @property
    def is_leaf(self) -> bool:
        return False


class TextStyleOverride(BaseModel):
    """Per-node typography overrides. Unset values fall back to defaults."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    font_size_token: SizeToken | None = None
    color_token: str | None = None
    font_weight: str | None = None
    font_style: FontStyle | None = None
    text_transform: TextTransform | None = None


# -----------------------------------------------------------------------------
# Container Nodes
# Note: these use the forward reference "Node" which is resolved at the end
# of the module via model_rebuild() calls.
# -----------------------------------------------------------------------------


class ContainerNode(NodeBase):
    """A node that owns an ordered list of children."""

    children: list[Node] = Field(default_factory=list, description="Child nodes")
    spacing: int | None = Field(default=None, ge=0, description="Gap between children")

    @model_validator(mode="before")
    @classmethod
    def lift_legacy_style(cls, data: Any) -> Any:
        """Move ``style.spacing`` written by older builders to ``spacing``."""
        if isinstance(data, dict) and isinstance(data.get("style"), dict):
            data = dict(data)
            style = data.pop("style")
            if "spacing" in style and data.get("spacing") is None:
                data["spacing"] = style["spacing"]
        return data


class SectionNode(ContainerNode):
    """Titled block with optional divider under the title and bottom rule."""

    type: Literal["section"] = "section"
    title: str = "Section"
    show_title: bool = True
    icon: str | None = None
    icon_separator: str | None = None
    title_style: TextStyleOverride | None = None
    title_divider: DividerStyle | None = None
    show_divider: bool | None = Field(
        default=None, description="Bottom rule; None follows the theme"
    )


class FlexNode(ContainerNode):
    """Common layout attributes of rows and columns."""

    align: str | None = Field(default=None, description="Cross-axis alignment")
    justify: str | None = Field(default=None, description="Main-axis justification")
    span: int | None = Field(default=None, gt=0, description="Flex grow factor")
    width_pct: float | None = Field(default=None, gt=0, le=100)
    divider: DividerStyle | None = None


class RowNode(FlexNode):
    """Horizontal flex container."""

    type: Literal["row"] = "row"
    wrap: bool = False


class ColumnNode(FlexNode):
    """Vertical flex container."""

    type: Literal["column"] = "column"


class RepeatNode(ContainerNode):
    """Block whose single child is instantiated once per list item."""

    type: Literal["repeat"] = "repeat"
    label: str | None = Field(default=None, description="Name shown on the fill form")

    @field_validator("children")
    @classmethod
    def single_child(cls, v: list[Node]) -> list[Node]:
        if len(v) > 1:
            raise ValueError("repeat accepts exactly one child template")
        return v

    @property
    def item_template(self) -> Node | None:
        """The child subtree instantiated per item, if any."""
        return self.children[0] if self.children else None


# -----------------------------------------------------------------------------
# Leaf Nodes
# -----------------------------------------------------------------------------


class TextNode(NodeBase):
    """Leaf that renders a bound value as text, bullets or chips."""

    type: Literal["text", "bullet-list", "chip-list"] = "text"
    bind_field: str | None = Field(default=None, description="Bound field id")
    font_size_token: SizeToken | None = None
    color_token: str | None = None
    font_weight: str | None = None
    font_style: FontStyle | None = None
    text_align: TextAlign | None = None
    text_transform: TextTransform | None = None
    icon: str | None = None
    icon_separator: str | None = None

    @field_validator("bind_field", mode="before")
    @classmethod
    def empty_binding(cls, v: Any) -> Any:
        """An empty binding means no binding."""
        return None if v == "" else v

    @property
    def is_leaf(self) -> bool:
        return True


Node = Annotated[
    Union[SectionNode, RowNode, ColumnNode, RepeatNode, TextNode],
    Field(discriminator="type"),
]

ContainerNode.model_rebuild()
SectionNode.model_rebuild()
FlexNode.model_rebuild()
RowNode.model_rebuild()
ColumnNode.model_rebuild()
RepeatNode.model_rebuild()

NODE_ADAPTER: TypeAdapter[Node] = TypeAdapter(Node)
