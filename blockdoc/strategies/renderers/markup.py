"""Deterministic projection of a template tree to HTML.

Node fragments are assembled with markupsafe so every value coming from
the template or the value object is escaped. The page shell and the
stylesheet are Jinja2 templates shipped next to this module.

The builder preview and the filled document both go through
``MarkupBuilder.build``; the only difference between them is whether
repeats are expanded.
"""

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from blockdoc.core.config import Settings, get_settings
from blockdoc.engine.scope import RepeatStep, resolve_scope
from blockdoc.engine.styles import (
    border_value,
    container_divider,
    flex_declarations,
    font_stack,
    resolve_page,
    resolve_style,
    sanitize_css_value,
    section_bottom_rule,
    section_title_divider,
)
from blockdoc.interfaces.renderer import RenderResult
from blockdoc.models.nodes import ColumnNode, FlexNode, Node, RepeatNode, RowNode, SectionNode, TextNode
from blockdoc.models.template import TemplateDocument
from blockdoc.models.theme import DividerStyle

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

_BULLET_SPLIT = re.compile(r"\r?\n")
_CHIP_SPLIT = re.compile(r"[,\r\n]")
_BULLET_MARKER = re.compile(r"^[•\-*]\s*")

Values = Mapping[str, Any]


def _style(declarations: Mapping[str, str]) -> str:
    return "; ".join(f"{name}: {value}" for name, value in declarations.items())


def _divider_declarations(divider: DividerStyle, spacing: int) -> dict[str, str]:
    return {
        "padding-bottom": f"{spacing}px",
        "border-bottom": border_value(divider),
    }


def _value_text(value: Any) -> str:
    """Flatten a value object entry to text. Mappings have no text form."""
    if value is None or isinstance(value, Mapping):
        return ""
    if isinstance(value, (list, tuple)):
        return "\n".join(_value_text(item) for item in value)
    return str(value)


def split_items(value: Any, node_type: str) -> list[str]:
    """Split a bound value into list items.

    Bullet lists split on newlines and drop leading bullet markers; chip
    lists split on commas and newlines. Lists are taken item by item.
    """
    if isinstance(value, (list, tuple)):
        raw = [_value_text(item) for item in value]
    else:
        pattern = _CHIP_SPLIT if node_type == "chip-list" else _BULLET_SPLIT
        raw = pattern.split(_value_text(value))

    items = []
    for item in raw:
        item = item.strip()
        if node_type == "bullet-list":
            item = _BULLET_MARKER.sub("", item)
        if item:
            items.append(item)
    return items


class MarkupBuilder:
    """Render a template and a value object to markup and a stylesheet.

    The output is a pure function of the template, the values and the
    settings: no ids, clocks or randomness are involved.

    Example:
        ```python
        builder = MarkupBuilder()
        result = builder.build(template, values, expand_repeats=True)
        html = result.html
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the builder.

        Args:
            settings: Engine settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._setup_jinja()

    def _setup_jinja(self) -> None:
        """Setup Jinja2 environment."""
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(enabled_extensions=("html",), default=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def build(
        self,
        template: TemplateDocument,
        values: Values | None,
        *,
        expand_repeats: bool,
    ) -> RenderResult:
        """Project the template tree to markup.

        Args:
            template: Template to render.
            values: Value object for the top-level scope.
            expand_repeats: Expand repeats into one subtree per item. When
                False each repeat renders a labelled placeholder block.

        Returns:
            RenderResult with the page markup, stylesheet and standalone HTML.
        """
        values = values or {}
        body = self._render_node(template, template.root, values, expand_repeats)
        page = resolve_page(template.page)

        markup = self.jinja_env.get_template("page.html").render(
            body=body,
            page=page,
            template_id=template.id,
        )
        stylesheet = self.jinja_env.get_template("stylesheet.css").render(
            page=page,
            body_font=font_stack(template.theme.fonts.body),
            base_font_size=template.theme.base_font_size,
            line_height=template.theme.line_height,
            text_color=sanitize_css_value(template.theme.colors.get("primary", "#000000")),
            muted_color=sanitize_css_value(template.theme.colors.get("muted", "#666")),
        )
        html = self.jinja_env.get_template("document.html").render(
            title=template.id,
            stylesheet=Markup(stylesheet),
            markup=Markup(markup),
        )

        logger.debug(
            f"Rendered template {template.id} "
            f"({'expanded' if expand_repeats else 'preview'}, {len(markup)} chars)"
        )
        return RenderResult(markup=markup, stylesheet=stylesheet, html=html)

    # -------------------------------------------------------------------------
    # Node projection
    # -------------------------------------------------------------------------

    def _render_node(
        self,
        template: TemplateDocument,
        node: Node,
        scope: Values,
        expand: bool,
    ) -> Markup:
        match node:
            case SectionNode():
                return self._render_section(template, node, scope, expand)
            case RowNode() | ColumnNode():
                return self._render_flex(template, node, scope, expand)
            case RepeatNode():
                if expand:
                    return self._render_repeat(template, node, scope)
                return self._render_repeat_placeholder(template, node)
            case TextNode():
                return self._render_leaf(template, node, scope)
            case _:
                raise TypeError(f"Unsupported node: {type(node).__name__}")

    def _render_children(
        self,
        template: TemplateDocument,
        children: list[Node],
        scope: Values,
        expand: bool,
    ) -> Markup:
        return Markup("").join(
            self._render_node(template, child, scope, expand) for child in children
        )

    def _render_section(
        self,
        template: TemplateDocument,
        node: SectionNode,
        scope: Values,
        expand: bool,
    ) -> Markup:
        theme = template.theme
        style = resolve_style(theme, node)

        container: dict[str, str] = {
            "display": "flex",
            "flex-direction": "column",
            "gap": f"{style.gap}px",
        }
        rule = section_bottom_rule(theme, node)
        if rule is not None:
            container.update(_divider_declarations(rule, theme.section_gap))

        title = Markup("")
        if node.show_title:
            title_css = {k: v for k, v in style.declarations().items() if k != "gap"}
            divider = section_title_divider(theme, node)
            if divider is not None:
                spacing = divider.spacing if divider.spacing is not None else theme.row_divider_spacing
                title_css.update(_divider_declarations(divider, spacing))
            title = Markup('<div class="bd-section-title" style="{}">{}{}</div>').format(
                _style(title_css),
                self._icon(style.icon, style.icon_separator),
                node.title,
            )

        return Markup(
            '<section class="bd-section" data-node-id="{}" style="{}">{}{}</section>'
        ).format(
            node.id,
            _style(container),
            title,
            self._render_children(template, node.children, scope, expand),
        )

    def _render_flex(
        self,
        template: TemplateDocument,
        node: FlexNode,
        scope: Values,
        expand: bool,
    ) -> Markup:
        style = resolve_style(template.theme, node)
        css: dict[str, str] = {
            "display": "flex",
            "flex-direction": "row" if isinstance(node, RowNode) else "column",
        }
        css.update(style.declarations())
        css.update(flex_declarations(node))
        divider = container_divider(template.theme, node)
        if divider is not None:
            css.update(_divider_declarations(divider, divider.spacing or 0))

        return Markup('<div class="bd-{}" data-node-id="{}" style="{}">{}</div>').format(
            node.type,
            node.id,
            _style(css),
            self._render_children(template, node.children, scope, expand),
        )

    def _render_repeat(
        self,
        template: TemplateDocument,
        node: RepeatNode,
        scope: Values,
    ) -> Markup:
        style = resolve_style(template.theme, node)
        items = scope.get(node.id)
        count = len(items) if isinstance(items, list) else 0

        rendered = []
        child = node.item_template
        for index in range(count):
            item_scope = resolve_scope(scope, [RepeatStep(node.id, index)])
            content = (
                self._render_node(template, child, item_scope, True)
                if child is not None
                else Markup("")
            )
            rendered.append(
                Markup('<div class="bd-repeat-item" data-repeat-index="{}">{}</div>').format(
                    index, content
                )
            )

        return Markup(
            '<div class="bd-repeat" data-node-id="{}" style="{}">{}</div>'
        ).format(
            node.id,
            _style({"display": "flex", "flex-direction": "column", **style.declarations()}),
            Markup("").join(rendered),
        )

    def _render_repeat_placeholder(self, template: TemplateDocument, node: RepeatNode) -> Markup:
        label = (node.label or "").strip() or self._settings.repeat_placeholder_label
        return Markup(
            '<div class="bd-repeat bd-repeat-placeholder" data-node-id="{}">{}</div>'
        ).format(node.id, label)

    def _render_leaf(
        self,
        template: TemplateDocument,
        node: TextNode,
        scope: Values,
    ) -> Markup:
        style = resolve_style(template.theme, node)
        value = scope.get(node.bind_field) if node.bind_field else None

        if node.type == "text":
            text = _value_text(value)
            items = [text] if text.strip() else []
        else:
            items = split_items(value, node.type)

        classes = [f"bd-{node.type}"]
        if not items:
            items = [self._fallback_text(template, node)]
            classes.append("bd-placeholder")

        icon = self._icon(style.icon, style.icon_separator)
        css = _style(style.declarations())

        if node.type == "bullet-list":
            content = Markup("").join(Markup("<li>{}</li>").format(item) for item in items)
            return Markup('<ul class="{}" data-node-id="{}" style="{}">{}</ul>').format(
                " ".join(classes), node.id, css, content
            )
        if node.type == "chip-list":
            content = icon + Markup("").join(
                Markup('<span class="bd-chip">{}</span>').format(item) for item in items
            )
        else:
            content = icon + items[0]
        return Markup('<div class="{}" data-node-id="{}" style="{}">{}</div>').format(
            " ".join(classes), node.id, css, content
        )

    def _fallback_text(self, template: TemplateDocument, node: TextNode) -> str:
        """Placeholder, then label of the bound field, then sample text."""
        definition = template.fields.get(node.bind_field) if node.bind_field else None
        if definition is not None:
            if definition.placeholder:
                return definition.placeholder
            if definition.label:
                return definition.label
        return self._settings.sample_text

    @staticmethod
    def _icon(icon: str | None, separator: str) -> Markup:
        if not icon:
            return Markup("")
        return Markup('<span class="bd-icon">{}</span>{}').format(icon, separator)
