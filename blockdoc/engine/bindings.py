"""Binding integrity between the field registry and the layout tree.

Field renames and removals flow through ``rewrite_bindings`` so that no
leaf is left pointing at a field id that no longer exists.
"""

import logging

from blockdoc.core.errors import IntegrityWarning, NotFoundError, ValidationError
from blockdoc.engine.tree import find_node, iter_nodes, replace_node
from blockdoc.models.nodes import ContainerNode, Node, TextNode
from blockdoc.models.template import TemplateDocument

logger = logging.getLogger(__name__)


def rewrite_bindings(root: Node, old_field_id: str, new_field_id: str | None) -> Node:
    """Point every leaf bound to ``old_field_id`` at ``new_field_id``.

    Passing None clears the binding. The rewrite is total and
    idempotent: running it twice yields the same tree as running it once.

    Args:
        root: Current tree.
        old_field_id: Field id to replace.
        new_field_id: Replacement field id, or None to unbind.

    Returns:
        The rewritten tree. Subtrees without matching leaves are shared.
    """
    if old_field_id == new_field_id:
        return root

    def rewrite(node: Node) -> Node:
        if isinstance(node, TextNode):
            if node.bind_field == old_field_id:
                return node.model_copy(update={"bind_field": new_field_id})
            return node
        if isinstance(node, ContainerNode):
            children = [rewrite(child) for child in node.children]
            if any(new is not old for new, old in zip(children, node.children)):
                return node.model_copy(update={"children": children})
        return node

    return rewrite(root)


def bound_node_ids(root: Node, field_id: str) -> list[str]:
    """Return the ids of all leaves bound to ``field_id``, in tree order."""
    return [
        node.id
        for node in iter_nodes(root)
        if isinstance(node, TextNode) and node.bind_field == field_id
    ]


def check_in_use(template: TemplateDocument, field_id: str) -> list[str]:
    """List the nodes that would be affected by renaming or removing a field."""
    return bound_node_ids(template.root, field_id)


def usage_warning(template: TemplateDocument, field_id: str) -> IntegrityWarning | None:
    """Build the warning to show the author before a field is removed.

    Returns:
        An IntegrityWarning if any leaf binds the field, else None.
    """
    node_ids = check_in_use(template, field_id)
    if not node_ids:
        return None
    return IntegrityWarning(field_id, node_ids)


def bound_field_ids(root: Node) -> list[str]:
    """Return the distinct field ids bound anywhere in the tree, in tree order."""
    seen: dict[str, None] = {}
    for node in iter_nodes(root):
        if isinstance(node, TextNode) and node.bind_field:
            seen.setdefault(node.bind_field, None)
    return list(seen)


def find_dangling_bindings(template: TemplateDocument) -> list[str]:
    """Return the ids of leaves bound to a field that is not registered."""
    return [
        node.id
        for node in iter_nodes(template.root)
        if isinstance(node, TextNode)
        and node.bind_field is not None
        and node.bind_field not in template.fields
    ]


def bind_field(
    template: TemplateDocument,
    node_id: str,
    field_id: str | None,
) -> TemplateDocument:
    """Bind a leaf to a registered field, or unbind it with None.

    Raises:
        NotFoundError: If the node or the field does not exist.
        ValidationError: If the node is not a leaf.
    """
    node = find_node(template.root, node_id)
    if not isinstance(node, TextNode):
        raise ValidationError(
            f"Binding is available for text, bullet-list and chip-list nodes, not '{node.type}'"
        )
    if field_id is not None and field_id not in template.fields:
        raise NotFoundError(f"Field not found: {field_id}")

    root = replace_node(
        template.root,
        node_id,
        lambda n: n.model_copy(update={"bind_field": field_id}),
    )
    logger.debug(f"Node '{node_id}' bound to {field_id!r}")
    return template.with_root(root)
