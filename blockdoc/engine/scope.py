"""Value scope resolution for nested repeats.

A value object maps field ids to strings and repeat node ids to lists of
nested value objects. A repeat path, a sequence of ``(repeat id, item
index)`` steps, selects the scope a form control or rendered subtree
lives in. Writes rebuild only the mappings and lists on that path; every
other key and list element is carried over as is.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from blockdoc.core.errors import NotFoundError, ValidationError
from blockdoc.engine.tree import find_node, find_node_path, iter_nodes
from blockdoc.models.nodes import ContainerNode, Node, RepeatNode, TextNode
from blockdoc.models.template import TemplateDocument

logger = logging.getLogger(__name__)

Values = Mapping[str, Any]
Direction = Literal["up", "down"]


@dataclass(frozen=True)
class RepeatStep:
    """One step of a repeat path.

    Attributes:
        repeat_id: Id of the repeat node.
        index: Zero-based item index within that repeat's list.
    """

    repeat_id: str
    index: int


RepeatPath = Sequence[RepeatStep | tuple[str, int]]


def _step(step: RepeatStep | tuple[str, int]) -> RepeatStep:
    return step if isinstance(step, RepeatStep) else RepeatStep(*step)


def _items(scope: Values, repeat_id: str) -> list[Any]:
    items = scope.get(repeat_id)
    return items if isinstance(items, list) else []


# =============================================================================
# Reading and writing scopes
# =============================================================================


def resolve_scope(values: Values | None, path: RepeatPath) -> Values:
    """Return the value object visible at ``path``.

    A missing or non-list repeat value counts as an empty list, and an
    out-of-range index yields an empty scope.
    """
    scope: Values = values or {}
    for raw_step in path:
        step = _step(raw_step)
        items = _items(scope, step.repeat_id)
        if not 0 <= step.index < len(items):
            return {}
        item = items[step.index]
        scope = item if isinstance(item, Mapping) else {}
    return scope


def write_at_scope(
    values: Values | None,
    path: RepeatPath,
    updater: Callable[[Values], Values],
) -> dict[str, Any]:
    """Replace the scope at ``path`` with ``updater(scope)``.

    Returns:
        A new root value object. Only the mappings and lists along the path
        are copied.

    Raises:
        NotFoundError: If a step points at an item that does not exist.
    """
    steps = [_step(step) for step in path]

    def write(scope: Values, depth: int) -> dict[str, Any]:
        if depth == len(steps):
            return dict(updater(scope))
        step = steps[depth]
        items = _items(scope, step.repeat_id)
        if not 0 <= step.index < len(items):
            raise NotFoundError(
                f"Repeat '{step.repeat_id}' has no item at index {step.index}"
            )
        item = items[step.index]
        new_items = list(items)
        new_items[step.index] = write(item if isinstance(item, Mapping) else {}, depth + 1)
        return {**scope, step.repeat_id: new_items}

    return write(values or {}, 0)


def set_field_value(
    values: Values | None,
    path: RepeatPath,
    field_id: str,
    value: Any,
) -> dict[str, Any]:
    """Set one field value inside the scope at ``path``."""
    return write_at_scope(values, path, lambda scope: {**scope, field_id: value})


# =============================================================================
# Repeat list operations
# =============================================================================


def default_item(item_template: Node | None) -> dict[str, Any]:
    """Build a freshly defaulted item for a repeat's child subtree.

    Every bound field starts as an empty string and every nested repeat as
    an empty list. Nested repeats are not descended into; their fields live
    in their own items.
    """
    item: dict[str, Any] = {}

    def walk(node: Node) -> None:
        if isinstance(node, RepeatNode):
            item.setdefault(node.id, [])
            return
        if isinstance(node, TextNode):
            if node.bind_field:
                item.setdefault(node.bind_field, "")
            return
        if isinstance(node, ContainerNode):
            for child in node.children:
                walk(child)

    if item_template is not None:
        walk(item_template)
    return item


def append_item(
    values: Values | None,
    path: RepeatPath,
    repeat_id: str,
    item_template: Node | None,
) -> dict[str, Any]:
    """Append a defaulted item to the list of ``repeat_id`` at ``path``.

    Args:
        values: Root value object.
        path: Scope that holds the repeat's list.
        repeat_id: Id of the repeat node.
        item_template: The repeat's child subtree. Passing the repeat node
            itself is accepted too.
    """
    if isinstance(item_template, RepeatNode) and item_template.id == repeat_id:
        item_template = item_template.item_template
    fresh = default_item(item_template)

    def append(scope: Values) -> Values:
        return {**scope, repeat_id: [*_items(scope, repeat_id), fresh]}

    return write_at_scope(values, path, append)


def remove_item(
    values: Values | None,
    path: RepeatPath,
    repeat_id: str,
    index: int,
) -> dict[str, Any]:
    """Remove the item at ``index`` from the list of ``repeat_id``.

    Raises:
        NotFoundError: If there is no item at ``index``.
    """

    def remove(scope: Values) -> Values:
        items = _items(scope, repeat_id)
        if not 0 <= index < len(items):
            raise NotFoundError(f"Repeat '{repeat_id}' has no item at index {index}")
        return {**scope, repeat_id: items[:index] + items[index + 1:]}

    return write_at_scope(values, path, remove)


def move_item(
    values: Values | None,
    path: RepeatPath,
    repeat_id: str,
    index: int,
    direction: Direction,
) -> Values:
    """Swap an item with its neighbour.

    Moving past either end returns ``values`` unchanged.

    Raises:
        ValidationError: If ``direction`` is not ``up`` or ``down``.
    """
    if direction not in ("up", "down"):
        raise ValidationError(f"Invalid direction: {direction!r}")
    items = _items(resolve_scope(values, path), repeat_id)
    target = index - 1 if direction == "up" else index + 1
    if not (0 <= index < len(items) and 0 <= target < len(items)):
        return values if values is not None else {}

    def move(scope: Values) -> Values:
        reordered = list(_items(scope, repeat_id))
        reordered[index], reordered[target] = reordered[target], reordered[index]
        return {**scope, repeat_id: reordered}

    return write_at_scope(values, path, move)


# =============================================================================
# Template-aware helpers
# =============================================================================


def repeat_ancestors(root: Node, node_id: str) -> list[str]:
    """Ids of the repeat nodes enclosing ``node_id``, outermost first.

    A repeat is not its own ancestor.

    Raises:
        NotFoundError: If no node has that id.
    """
    ancestors = find_node_path(root, node_id)[:-1]
    return [
        ancestor for ancestor in ancestors if isinstance(find_node(root, ancestor), RepeatNode)
    ]


def _top_level_repeats(nodes: Iterable[Node]) -> list[RepeatNode]:
    """Repeats reachable from ``nodes`` without crossing another repeat."""
    found: list[RepeatNode] = []

    def walk(current: Node) -> None:
        if isinstance(current, RepeatNode):
            found.append(current)
            return
        if isinstance(current, ContainerNode):
            for child in current.children:
                walk(child)

    for node in nodes:
        walk(node)
    return found


def build_values(template: TemplateDocument, values: Values | None) -> dict[str, Any]:
    """Keep only the registered fields and the non-empty repeat lists.

    Empty strings are dropped so that renderers fall back to placeholders.
    """
    values = values or {}
    result: dict[str, Any] = {}
    for field_id in template.fields:
        value = values.get(field_id)
        if value is None or value == "":
            continue
        result[field_id] = value

    repeat_ids = [node.id for node in iter_nodes(template.root) if isinstance(node, RepeatNode)]
    for repeat_id in repeat_ids:
        items = values.get(repeat_id)
        if isinstance(items, list) and items:
            result[repeat_id] = items
    return result


def build_preview_values(template: TemplateDocument, values: Values | None) -> dict[str, Any]:
    """Like ``build_values`` but every repeat shows at least one item.

    Nested repeats are filled inside each item of their enclosing repeat.
    """

    def fill(scope: Values, nodes: Iterable[Node]) -> dict[str, Any]:
        result = dict(scope)
        for repeat in _top_level_repeats(nodes):
            items = _items(result, repeat.id) or [{}]
            template_node = repeat.item_template
            if template_node is None:
                result[repeat.id] = list(items)
                continue
            result[repeat.id] = [
                fill(item if isinstance(item, Mapping) else {}, [template_node]) for item in items
            ]
        return result

    root = template.root
    top = root.children if isinstance(root, ContainerNode) else []
    filled = fill(build_values(template, values), top)
    logger.debug(f"Preview values built for {len(filled)} top-level key(s)")
    return filled

