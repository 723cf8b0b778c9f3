"""Field registry operations.

Fields are stored in ``TemplateDocument.fields`` keyed by id. Renames and
removals go through the binding rewrite so the layout never keeps a
reference to a field id that is gone.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from blockdoc.core.errors import NotFoundError, ValidationError, format_pydantic_errors
from blockdoc.engine.bindings import check_in_use, rewrite_bindings
from blockdoc.models.fields import FieldDefinition, InputKind
from blockdoc.models.template import TemplateDocument

logger = logging.getLogger(__name__)


def normalize_field_id(field_id: str | None) -> str:
    """Trim a field id and reject empty ones.

    Raises:
        ValidationError: If the id is empty or whitespace.
    """
    trimmed = (field_id or "").strip()
    if not trimmed:
        raise ValidationError("Field ID is required.")
    return trimmed


def _coerce_definition(definition: FieldDefinition | Mapping[str, Any]) -> FieldDefinition:
    if isinstance(definition, FieldDefinition):
        return definition
    try:
        return FieldDefinition.model_validate(dict(definition))
    except PydanticValidationError as e:
        raise ValidationError("Invalid field definition", format_pydantic_errors(e)) from e


def list_fields(template: TemplateDocument) -> list[tuple[str, FieldDefinition]]:
    """Return the registered fields sorted by id."""
    return sorted(template.fields.items(), key=lambda item: item[0])


def get_field(template: TemplateDocument, field_id: str) -> FieldDefinition:
    """Look up a field definition.

    Raises:
        NotFoundError: If the field is not registered.
    """
    try:
        return template.fields[field_id]
    except KeyError:
        raise NotFoundError(f"Field not found: {field_id}") from None


def upsert_field(
    template: TemplateDocument,
    field_id: str,
    definition: FieldDefinition | Mapping[str, Any],
    *,
    editing_id: str | None = None,
) -> TemplateDocument:
    """Create a field, or update the field currently being edited.

    When ``editing_id`` names an existing field and differs from
    ``field_id``, the field is renamed first and its bindings follow.

    Args:
        template: Current template.
        field_id: Id the field should have after the call.
        definition: Field attributes.
        editing_id: Id of the field being edited, or None when creating.

    Raises:
        ValidationError: If the id is empty, or already used by a field other
            than the one being edited, or the definition is invalid.
        NotFoundError: If ``editing_id`` is not registered.
    """
    field_id = normalize_field_id(field_id)
    parsed = _coerce_definition(definition)

    if editing_id is not None and editing_id not in template.fields:
        raise NotFoundError(f"Field not found: {editing_id}")
    if field_id in template.fields and field_id != editing_id:
        raise ValidationError("Field ID must be unique.")

    if editing_id is not None and editing_id != field_id:
        template = rename_field(template, editing_id, field_id)

    fields = dict(template.fields)
    fields[field_id] = parsed
    logger.debug(f"Field '{field_id}' saved")
    return template.with_fields(fields)


def rename_field(template: TemplateDocument, old_id: str, new_id: str) -> TemplateDocument:
    """Rename a field and rewrite every binding that referenced it.

    The field keeps its position in the registry.

    Raises:
        NotFoundError: If ``old_id`` is not registered.
        ValidationError: If ``new_id`` is empty, already registered, or
            still bound by leaves that predate its removal.
    """
    new_id = normalize_field_id(new_id)
    if old_id not in template.fields:
        raise NotFoundError(f"Field not found: {old_id}")
    if new_id == old_id:
        return template
    if new_id in template.fields:
        raise ValidationError("Field ID must be unique.")
    stale = check_in_use(template, new_id)
    if stale:
        raise ValidationError(
            f"Field ID '{new_id}' is still bound by {len(stale)} element(s).",
            [f"node '{node_id}' binds '{new_id}'" for node_id in stale],
        )

    fields = {
        (new_id if key == old_id else key): value
        for key, value in template.fields.items()
    }
    affected = check_in_use(template, old_id)
    root = rewrite_bindings(template.root, old_id, new_id)
    logger.info(f"Renamed field '{old_id}' -> '{new_id}' ({len(affected)} binding(s) rewritten)")
    return template.with_fields(fields).with_root(root)


def remove_field(
    template: TemplateDocument,
    field_id: str,
    *,
    cascade: bool = False,
) -> TemplateDocument:
    """Remove a field from the registry.

    Call ``check_in_use`` (or ``usage_warning``) first and ask the author
    for confirmation; pass ``cascade=True`` once they accept. Bindings to
    the removed field are cleared.

    Raises:
        NotFoundError: If the field is not registered.
        ValidationError: If leaves still bind the field and ``cascade`` is False.
    """
    if field_id not in template.fields:
        raise NotFoundError(f"Field not found: {field_id}")

    affected = check_in_use(template, field_id)
    if affected and not cascade:
        raise ValidationError(
            f"Field '{field_id}' is bound by {len(affected)} node(s); "
            "confirm with cascade=True to remove it",
            details=affected,
        )

    fields = {key: value for key, value in template.fields.items() if key != field_id}
    root = rewrite_bindings(template.root, field_id, None)
    logger.info(f"Removed field '{field_id}' ({len(affected)} binding(s) cleared)")
    return template.with_fields(fields).with_root(root)


def validate_value(definition: FieldDefinition, value: Any) -> list[str]:
    """Check a filled value against the field's constraints.

    Returns:
        Human readable problems; empty when the value is acceptable.
    """
    label = definition.label or "This field"
    if isinstance(value, (list, tuple)):
        text = "\n".join(str(item) for item in value)
    else:
        text = "" if value is None else str(value)

    problems = []
    if definition.required and not text.strip():
        problems.append(f"{label} is required.")
    if definition.max_length is not None and len(text) > definition.max_length:
        problems.append(f"{label} must be at most {definition.max_length} characters.")
    if text.strip() and definition.input_kind is InputKind.EMAIL and "@" not in text:
        problems.append(f"{label} must be an email address.")
    return problems
