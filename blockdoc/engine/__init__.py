"""Pure operations on templates and value objects."""

from blockdoc.engine.bindings import (
    bind_field,
    bound_field_ids,
    bound_node_ids,
    check_in_use,
    find_dangling_bindings,
    rewrite_bindings,
    usage_warning,
)
from blockdoc.engine.field_groups import FieldGroup, build_field_groups
from blockdoc.engine.registry import (
    get_field,
    list_fields,
    remove_field,
    rename_field,
    upsert_field,
    validate_value,
)
from blockdoc.engine.scope import (
    RepeatStep,
    append_item,
    build_preview_values,
    build_values,
    default_item,
    move_item,
    remove_item,
    repeat_ancestors,
    resolve_scope,
    set_field_value,
    write_at_scope,
)
from blockdoc.engine.session import EditorSession
from blockdoc.engine.styles import PageGeometry, ResolvedStyle, resolve_page, resolve_style
from blockdoc.engine.tree import (
    can_add_child,
    collect_ids,
    collect_repeat_ids,
    duplicate_node,
    find_node,
    find_node_path,
    find_parent,
    insert_child,
    iter_nodes,
    move_node,
    move_node_within_parent,
    new_node,
    remove_node,
    replace_node,
    update_node_attributes,
)

__all__ = [
    "bind_field",
    "bound_field_ids",
    "bound_node_ids",
    "check_in_use",
    "find_dangling_bindings",
    "rewrite_bindings",
    "usage_warning",
    "FieldGroup",
    "build_field_groups",
    "get_field",
    "list_fields",
    "remove_field",
    "rename_field",
    "upsert_field",
    "validate_value",
    "RepeatStep",
    "append_item",
    "build_preview_values",
    "build_values",
    "default_item",
    "move_item",
    "remove_item",
    "repeat_ancestors",
    "resolve_scope",
    "set_field_value",
    "write_at_scope",
    "EditorSession",
    "PageGeometry",
    "ResolvedStyle",
    "resolve_page",
    "resolve_style",
    "can_add_child",
    "collect_ids",
    "collect_repeat_ids",
    "duplicate_node",
    "find_node",
    "find_node_path",
    "find_parent",
    "insert_child",
    "iter_nodes",
    "move_node",
    "move_node_within_parent",
    "new_node",
    "remove_node",
    "replace_node",
    "update_node_attributes",
]
