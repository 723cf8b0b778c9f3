"""Grouping of bound fields for the fill form.

The fill form walks the template one section at a time. Each section
that binds at least one field becomes a group; bindings outside any
section land in a trailing ``ungrouped`` group.
"""

from dataclasses import dataclass

from blockdoc.models.nodes import ContainerNode, Node, SectionNode, TextNode
from blockdoc.models.template import TemplateDocument

UNGROUPED_ID = "ungrouped"
UNGROUPED_TITLE = "Additional fields"
DEFAULT_SECTION_TITLE = "Section"


@dataclass(frozen=True)
class FieldGroup:
    """A step of the fill form.

    Attributes:
        id: Section node id, or ``ungrouped``.
        title: Title shown above the step.
        show_title: Whether the section shows its title in the document.
        field_ids: Bound field ids in tree order, without duplicates.
    """

    id: str
    title: str
    show_title: bool
    field_ids: tuple[str, ...]


def build_field_groups(template: TemplateDocument) -> list[FieldGroup]:
    """Group the bound fields of a template by their innermost section."""
    sections: list[tuple[SectionNode, dict[str, None]]] = []
    ungrouped: dict[str, None] = {}

    def walk(node: Node, bucket: dict[str, None] | None) -> None:
        if isinstance(node, SectionNode):
            own: dict[str, None] = {}
            sections.append((node, own))
            bucket = own
        elif isinstance(node, TextNode) and node.bind_field:
            (bucket if bucket is not None else ungrouped).setdefault(node.bind_field, None)
        if isinstance(node, ContainerNode):
            for child in node.children:
                walk(child, bucket)

    walk(template.root, None)

    groups = [
        FieldGroup(
            id=section.id,
            title=section.title.strip() or DEFAULT_SECTION_TITLE,
            show_title=section.show_title,
            field_ids=tuple(field_ids),
        )
        for section, field_ids in sections
        if field_ids
    ]
    if ungrouped:
        groups.append(
            FieldGroup(
                id=UNGROUPED_ID,
                title=UNGROUPED_TITLE,
                show_title=True,
                field_ids=tuple(ungrouped),
            )
        )
    return groups
