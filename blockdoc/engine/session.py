"""Editor session state.

Selection and the set of expanded tree rows belong to the host editor.
The session is an immutable value: every method returns a new session
and the tree functions never read it.
"""

from dataclasses import dataclass, field, replace

from blockdoc.core.errors import NotFoundError
from blockdoc.engine.tree import collect_ids, find_node, find_node_path, iter_nodes
from blockdoc.models.nodes import ROOT_ID, ContainerNode, Node


@dataclass(frozen=True)
class EditorSession:
    """Selected node and expanded rows of the structure panel."""

    selected_node_id: str = ROOT_ID
    expanded: frozenset[str] = field(default_factory=lambda: frozenset({ROOT_ID}))

    def select_node(self, root: Node, node_id: str) -> "EditorSession":
        """Select a node and expand every ancestor so it is visible.

        Raises:
            NotFoundError: If no node has that id.
        """
        ancestors = find_node_path(root, node_id)[:-1]
        return replace(
            self,
            selected_node_id=node_id,
            expanded=self.expanded | frozenset(ancestors),
        )

    def toggle_node(self, node_id: str) -> "EditorSession":
        if node_id in self.expanded:
            return replace(self, expanded=self.expanded - {node_id})
        return replace(self, expanded=self.expanded | {node_id})

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self.expanded

    def expand_all(self, root: Node) -> "EditorSession":
        """Expand every container in the tree."""
        containers = frozenset(
            node.id for node in iter_nodes(root) if isinstance(node, ContainerNode)
        )
        return replace(self, expanded=containers)

    def collapse_all(self) -> "EditorSession":
        return replace(self, expanded=frozenset({ROOT_ID}))

    def forget_nodes(self, root: Node) -> "EditorSession":
        """Drop ids that no longer exist in ``root``.

        Call after a deletion. A selection that disappeared falls back to
        the root.
        """
        existing = frozenset(collect_ids(root))
        selected = self.selected_node_id
        if selected not in existing:
            selected = ROOT_ID
        return replace(
            self,
            selected_node_id=selected,
            expanded=(self.expanded & existing) | {ROOT_ID},
        )

    def selected_node(self, root: Node) -> Node | None:
        """The selected node, or None if it is no longer in the tree."""
        try:
            return find_node(root, self.selected_node_id)
        except NotFoundError:
            return None
