"""Template tree queries and pure mutations.

Every mutation returns a new root; the input tree is never modified.
Untouched subtrees are shared between the old and the new tree.
"""

import logging
import uuid
from collections.abc import Callable, Iterator, Mapping
from typing import Any, Literal

from pydantic import ValidationError as PydanticValidationError

from blockdoc.core.errors import NotFoundError, ValidationError, format_pydantic_errors
from blockdoc.models.nodes import NODE_ADAPTER, ROOT_ID, ContainerNode, Node, RepeatNode

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]

# Attributes that cannot be changed through update_node_attributes
_STRUCTURAL_KEYS = {"id", "type", "children"}


# =============================================================================
# Queries
# =============================================================================


def iter_nodes(root: Node) -> Iterator[Node]:
    """Iterate over a node and all its descendants (depth-first, pre-order)."""
    yield root
    if isinstance(root, ContainerNode):
        for child in root.children:
            yield from iter_nodes(child)


def find_node(root: Node, node_id: str) -> Node:
    """Find a node by id.

    Raises:
        NotFoundError: If no node has that id.
    """
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    raise NotFoundError(f"Node not found: {node_id}")


def find_node_path(root: Node, node_id: str) -> list[str]:
    """Return the ids from the root down to (and including) ``node_id``.

    Raises:
        NotFoundError: If no node has that id.
    """

    def walk(node: Node, path: list[str]) -> list[str] | None:
        path = [*path, node.id]
        if node.id == node_id:
            return path
        if isinstance(node, ContainerNode):
            for child in node.children:
                found = walk(child, path)
                if found:
                    return found
        return None

    path = walk(root, [])
    if path is None:
        raise NotFoundError(f"Node not found: {node_id}")
    return path


def find_parent(root: Node, node_id: str) -> ContainerNode | None:
    """Return the parent of ``node_id``, or None for the root.

    Raises:
        NotFoundError: If no node has that id.
    """
    path = find_node_path(root, node_id)
    if len(path) < 2:
        return None
    parent = find_node(root, path[-2])
    if not isinstance(parent, ContainerNode):
        raise ValidationError(f"Parent of '{node_id}' cannot hold children")
    return parent


def collect_ids(node: Node) -> list[str]:
    """Return the ids of a node and all its descendants."""
    return [n.id for n in iter_nodes(node)]


def collect_repeat_ids(root: Node) -> list[str]:
    """Return the ids of all repeat nodes in the tree."""
    return [n.id for n in iter_nodes(root) if isinstance(n, RepeatNode)]


def can_add_child(node: Node) -> bool:
    """Whether ``node`` may receive another child.

    Leaves never take children and a repeat takes a single one.
    """
    if not isinstance(node, ContainerNode):
        return False
    if isinstance(node, RepeatNode):
        return len(node.children) < 1
    return True


# =============================================================================
# Construction
# =============================================================================


def new_node_id(node_type: str) -> str:
    """Generate a fresh node id for the given node type."""
    return f"{node_type}-{uuid.uuid4().hex[:10]}"


def new_node(node_type: str, node_id: str | None = None, **attributes: Any) -> Node:
    """Build a node of the given type.

    Args:
        node_type: One of the node type names (``section``, ``row``, ``text``, ...).
        node_id: Id to use. A fresh id is generated if None.
        **attributes: Variant attributes (snake_case or camelCase).

    Raises:
        ValidationError: If the type is unknown or an attribute is invalid.
    """
    data = {**attributes, "type": node_type, "id": node_id or new_node_id(node_type)}
    try:
        return NODE_ADAPTER.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {node_type} node", format_pydantic_errors(e)) from e


# =============================================================================
# Mutations
# =============================================================================


def _with_children(node: ContainerNode, children: list[Node]) -> ContainerNode:
    return node.model_copy(update={"children": children})


def _replace(node: Node, node_id: str, updater: Callable[[Node], Node]) -> Node:
    """Rebuild the path to ``node_id``, applying ``updater`` to that node."""
    if node.id == node_id:
        return updater(node)
    if not isinstance(node, ContainerNode):
        return node
    children = [_replace(child, node_id, updater) for child in node.children]
    if all(new is old for new, old in zip(children, node.children)):
        return node
    return _with_children(node, children)


def _detach(node: Node, node_id: str) -> Node:
    if not isinstance(node, ContainerNode):
        return node
    children = [_detach(child, node_id) for child in node.children if child.id != node_id]
    if len(children) == len(node.children) and all(
        new is old for new, old in zip(children, node.children)
    ):
        return node
    return _with_children(node, children)


def _check_can_receive(parent: Node, incoming_id: str | None = None) -> ContainerNode:
    if not isinstance(parent, ContainerNode):
        raise ValidationError(f"Node '{parent.id}' is a leaf and cannot have children")
    if isinstance(parent, RepeatNode):
        others = [child for child in parent.children if child.id != incoming_id]
        if others:
            raise ValidationError("repeat accepts exactly one child template")
    return parent


def replace_node(root: Node, node_id: str, updater: Callable[[Node], Node]) -> Node:
    """Return a new tree where ``node_id`` is replaced by ``updater(node)``.

    Raises:
        NotFoundError: If no node has that id.
    """
    find_node(root, node_id)
    return _replace(root, node_id, updater)


def insert_child(
    root: Node,
    parent_id: str,
    node: Node,
    index: int | None = None,
) -> Node:
    """Insert ``node`` (with its subtree) under ``parent_id``.

    Args:
        root: Current tree.
        parent_id: Id of the receiving container.
        node: Node to insert.
        index: Position among the parent's children; appended if None.
            Follows ``list.insert`` semantics for out-of-range values.

    Raises:
        NotFoundError: If the parent does not exist.
        ValidationError: If the parent is a leaf, a repeat that already has a
            child, or if an inserted id already exists in the tree.
    """
    parent = _check_can_receive(find_node(root, parent_id))

    existing = set(collect_ids(root))
    incoming = collect_ids(node)
    if ROOT_ID in incoming:
        raise ValidationError(f"Node id '{ROOT_ID}' is reserved for the root")
    clashes = sorted(existing.intersection(incoming))
    if clashes or len(set(incoming)) != len(incoming):
        raise ValidationError(f"Duplicate node id(s): {', '.join(clashes) or 'within inserted subtree'}")

    def add(target: Node) -> Node:
        if not isinstance(target, ContainerNode):
            raise ValidationError(f"Node '{target.id}' cannot have children")
        children = list(target.children)
        if index is None:
            children.append(node)
        else:
            children.insert(index, node)
        return _with_children(target, children)

    logger.debug(f"Inserting {node.type} '{node.id}' under '{parent.id}'")
    return _replace(root, parent_id, add)


def remove_node(root: Node, node_id: str) -> Node:
    """Remove a node and its whole subtree.

    Raises:
        ValidationError: If ``node_id`` is the root.
        NotFoundError: If no node has that id.
    """
    if node_id == root.id:
        raise ValidationError("The root node cannot be removed")
    removed = find_node(root, node_id)
    logger.info(f"Removing node '{node_id}' ({len(collect_ids(removed))} node(s) in subtree)")
    return _detach(root, node_id)


def move_node(root: Node, node_id: str, new_parent_id: str, index: int) -> Node:
    """Move a node (with its subtree) under another parent.

    ``index`` is the position among the new parent's children once the
    node has been detached from its old position.

    Raises:
        ValidationError: If the root is moved, the node is moved into its own
            subtree, or the destination cannot receive it.
        NotFoundError: If either node does not exist.
    """
    if node_id == root.id:
        raise ValidationError("The root node cannot be moved")
    node = find_node(root, node_id)
    find_node(root, new_parent_id)
    if new_parent_id in collect_ids(node):
        raise ValidationError(f"Cannot move '{node_id}' into its own subtree")

    detached = _detach(root, node_id)
    _check_can_receive(find_node(detached, new_parent_id), incoming_id=node_id)

    def add(target: Node) -> Node:
        if not isinstance(target, ContainerNode):
            raise ValidationError(f"Node '{target.id}' cannot have children")
        children = list(target.children)
        children.insert(index, node)
        return _with_children(target, children)

    return _replace(detached, new_parent_id, add)


def move_node_within_parent(root: Node, node_id: str, direction: Direction) -> Node:
    """Swap a node with its previous or next sibling.

    Moving past either end leaves the tree unchanged.

    Raises:
        ValidationError: If ``direction`` is not ``up`` or ``down``.
        NotFoundError: If no node has that id.
    """
    if direction not in ("up", "down"):
        raise ValidationError(f"Invalid direction: {direction!r}")
    parent = find_parent(root, node_id)
    if parent is None:
        return root

    position = next(i for i, child in enumerate(parent.children) if child.id == node_id)
    target = position - 1 if direction == "up" else position + 1
    if target < 0 or target >= len(parent.children):
        return root

    children = list(parent.children)
    children[position], children[target] = children[target], children[position]
    return _replace(root, parent.id, lambda p: _with_children(p, children))


def _clone_with_new_ids(node: Node) -> Node:
    update: dict[str, Any] = {"id": new_node_id(node.type)}
    if isinstance(node, ContainerNode):
        update["children"] = [_clone_with_new_ids(child) for child in node.children]
    return node.model_copy(update=update)


def duplicate_node(root: Node, node_id: str) -> tuple[Node, Node]:
    """Clone a node with fresh ids and insert it right after the original.

    Returns:
        The new tree and the inserted clone.

    Raises:
        ValidationError: If ``node_id`` is the root or its parent is a repeat.
        NotFoundError: If no node has that id.
    """
    original = find_node(root, node_id)
    parent = find_parent(root, node_id)
    if parent is None:
        raise ValidationError("The root node cannot be duplicated")
    if isinstance(parent, RepeatNode):
        raise ValidationError("repeat accepts exactly one child template")

    clone = _clone_with_new_ids(original)
    position = next(i for i, child in enumerate(parent.children) if child.id == node_id)
    return insert_child(root, parent.id, clone, position + 1), clone


def update_node_attributes(root: Node, node_id: str, patch: Mapping[str, Any]) -> Node:
    """Apply a partial attribute patch to one node.

    Keys may be snake_case or camelCase. A value of None clears an
    optional attribute.

    Raises:
        ValidationError: If the patch touches id/type/children or produces
            an invalid node.
        NotFoundError: If no node has that id.
    """
    node = find_node(root, node_id)
    model = type(node)
    names = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name

    normalized: dict[str, Any] = {}
    for key, value in patch.items():
        name = names.get(key, key)
        if name in _STRUCTURAL_KEYS:
            raise ValidationError(f"Attribute '{key}' cannot be changed through a patch")
        normalized[name] = value

    data = node.model_dump(exclude={"children"})
    data.update(normalized)
    try:
        patched = model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid patch for node '{node_id}'", format_pydantic_errors(e)) from e

    if isinstance(node, ContainerNode):
        patched = patched.model_copy(update={"children": node.children})
    return _replace(root, node_id, lambda _: patched)
