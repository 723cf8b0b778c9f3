"""Style resolution.

Turns theme tokens plus per-node overrides into concrete CSS values.
Resolution is a pure function of (theme, node) and is recomputed on
every render.
"""

import math
import re
from dataclasses import dataclass, field

from blockdoc.models.nodes import FlexNode, Node, RepeatNode, RowNode, SectionNode, TextNode
from blockdoc.models.theme import DEFAULT_FONT_SCALES, DividerStyle, Page, Theme

# Page sizes in CSS pixels at 96 dpi (portrait)
PAGE_SIZES: dict[str, tuple[int, int]] = {
    "A4": (794, 1123),
    "Letter": (816, 1056),
    "Legal": (816, 1344),
}

DEFAULT_SIZE_TOKEN = "body"
DEFAULT_FONT_WEIGHT = "400"
DEFAULT_FONT_STYLE = "normal"
DEFAULT_TEXT_ALIGN = "left"
DEFAULT_TEXT_TRANSFORM = "none"
DEFAULT_ICON_SEPARATOR = " "

_UNSAFE_CSS = re.compile(r"[;{}<>\"\\\n\r]")


def sanitize_css_value(value: object) -> str:
    """Strip characters that could end a declaration or a style element."""
    return _UNSAFE_CSS.sub("", str(value)).strip()


def round_px(value: float) -> int:
    """Round half up to a whole pixel."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ResolvedStyle:
    """Concrete style values for one node.

    Unset attributes produce no CSS declaration and inherit from the
    enclosing element.
    """

    font_size: int | None = None
    font_weight: str | None = None
    font_style: str | None = None
    font_family: str | None = None
    color: str | None = None
    text_align: str | None = None
    text_transform: str | None = None
    icon: str | None = None
    icon_separator: str = DEFAULT_ICON_SEPARATOR
    gap: int | None = None
    align: str | None = None
    justify: str | None = None

    def declarations(self) -> dict[str, str]:
        """CSS declarations in a fixed order."""
        css: dict[str, str] = {}
        if self.font_family is not None:
            css["font-family"] = font_stack(self.font_family)
        if self.font_size is not None:
            css["font-size"] = f"{self.font_size}px"
        if self.font_weight is not None:
            css["font-weight"] = self.font_weight
        if self.font_style is not None:
            css["font-style"] = self.font_style
        if self.color is not None:
            css["color"] = self.color
        if self.text_align is not None:
            css["text-align"] = self.text_align
        if self.text_transform is not None:
            css["text-transform"] = self.text_transform
        if self.gap is not None:
            css["gap"] = f"{self.gap}px"
        if self.align is not None:
            css["align-items"] = self.align
        if self.justify is not None:
            css["justify-content"] = self.justify
        return {key: sanitize_css_value(value) for key, value in css.items()}


@dataclass(frozen=True)
class PageGeometry:
    """Concrete page dimensions in pixels."""

    width: int
    height: int
    margin_x: int
    margin_y: int
    padding_x: int
    padding_y: int
    background_color: str
    border: str | None = field(default=None)


def font_stack(family: str) -> str:
    """Quote a font family and add a generic fallback."""
    name = sanitize_css_value(family).replace("'", "")
    return f"'{name}', sans-serif" if name else "sans-serif"


def font_size_px(theme: Theme, size_token: str | None) -> int:
    """Resolve a size token to pixels: base size times the token's scale.

    Unknown tokens use the body scale.
    """
    token = size_token or DEFAULT_SIZE_TOKEN
    scale = theme.font_scales.get(token)
    if scale is None:
        scale = DEFAULT_FONT_SCALES.get(token, theme.font_scales.get(DEFAULT_SIZE_TOKEN, 1.0))
    return round_px(theme.base_font_size * scale)


def resolve_color(theme: Theme, color_token: str | None) -> str | None:
    """Look up a color token. Unresolvable tokens mean no override."""
    if not color_token:
        return None
    return theme.colors.get(color_token)


def resolve_style(theme: Theme, node: Node) -> ResolvedStyle:
    """Resolve the concrete style of a node.

    For sections this is the style of the title; the section's own gap is
    carried along.
    """
    if isinstance(node, TextNode):
        return ResolvedStyle(
            font_size=font_size_px(theme, node.font_size_token),
            font_weight=node.font_weight or DEFAULT_FONT_WEIGHT,
            font_style=node.font_style or DEFAULT_FONT_STYLE,
            color=resolve_color(theme, node.color_token),
            text_align=node.text_align or DEFAULT_TEXT_ALIGN,
            text_transform=node.text_transform or DEFAULT_TEXT_TRANSFORM,
            icon=node.icon,
            icon_separator=node.icon_separator if node.icon_separator is not None else DEFAULT_ICON_SEPARATOR,
        )

    if isinstance(node, SectionNode):
        base = theme.section_title_style
        override = node.title_style
        size_token = (override and override.font_size_token) or base.font_size_token
        color_token = (override and override.color_token) or base.color_token
        return ResolvedStyle(
            font_size=font_size_px(theme, size_token),
            font_weight=(override and override.font_weight) or base.font_weight,
            font_style=(override and override.font_style) or base.font_style,
            font_family=theme.fonts.heading,
            color=resolve_color(theme, color_token),
            text_transform=(override and override.text_transform) or base.text_transform,
            icon=node.icon,
            icon_separator=node.icon_separator if node.icon_separator is not None else DEFAULT_ICON_SEPARATOR,
            gap=node.spacing if node.spacing is not None else theme.gap,
        )

    if isinstance(node, FlexNode):
        return ResolvedStyle(
            gap=node.spacing if node.spacing is not None else theme.gap,
            align=node.align,
            justify=node.justify,
        )

    if isinstance(node, RepeatNode):
        return ResolvedStyle(
            gap=node.spacing if node.spacing is not None else theme.repeat_item_gap,
        )

    return ResolvedStyle()


def flex_declarations(node: FlexNode) -> dict[str, str]:
    """Sizing declarations for a row or column inside its parent."""
    css: dict[str, str] = {}
    if isinstance(node, RowNode) and node.wrap:
        css["flex-wrap"] = "wrap"
    if node.span is not None:
        css["flex-grow"] = str(node.span)
        css["flex-basis"] = "0"
    if node.width_pct is not None:
        css["flex-basis"] = f"{node.width_pct:g}%"
        css["max-width"] = f"{node.width_pct:g}%"
    return css


def border_value(divider: DividerStyle) -> str:
    return sanitize_css_value(f"{divider.width}px {divider.style} {divider.color}")


def section_title_divider(theme: Theme, node: SectionNode) -> DividerStyle | None:
    """Divider under a section title, or None when disabled."""
    divider = node.title_divider or theme.section_title_divider
    return divider if divider.enabled else None


def section_bottom_rule(theme: Theme, node: SectionNode) -> DividerStyle | None:
    """Rule below a section, or None when disabled."""
    enabled = node.show_divider if node.show_divider is not None else theme.section_divider.enabled
    return theme.section_divider if enabled else None


def container_divider(theme: Theme, node: FlexNode) -> DividerStyle | None:
    """Rule below a row or column, or None when disabled.

    Missing spacing falls back to the theme's row divider spacing.
    """
    if node.divider is None or not node.divider.enabled:
        return None
    if node.divider.spacing is None:
        return node.divider.model_copy(update={"spacing": theme.row_divider_spacing})
    return node.divider


def resolve_page(page: Page) -> PageGeometry:
    """Resolve the page setup to pixel dimensions.

    Landscape swaps width and height.
    """
    width, height = PAGE_SIZES.get(page.size, PAGE_SIZES["A4"])
    if page.orientation == "landscape":
        width, height = height, width
    border = None
    if page.border.enabled:
        border = sanitize_css_value(f"{page.border.width}px {page.border.style} {page.border.color}")
    return PageGeometry(
        width=width,
        height=height,
        margin_x=page.margin_x,
        margin_y=page.margin_y,
        padding_x=page.padding_x,
        padding_y=page.padding_y,
        background_color=sanitize_css_value(page.background_color),
        border=border,
    )
