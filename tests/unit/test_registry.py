"""Unit tests for the field registry."""

import pytest

from blockdoc.core.errors import NotFoundError, ValidationError
from blockdoc.engine.bindings import bound_node_ids, find_dangling_bindings, rewrite_bindings
from blockdoc.engine.registry import (
    get_field,
    list_fields,
    normalize_field_id,
    remove_field,
    rename_field,
    upsert_field,
    validate_value,
)
from blockdoc.engine.tree import find_node
from blockdoc.models.fields import FieldDefinition, InputKind


# =============================================================================
# Create / Update
# =============================================================================


class TestUpsertField:
    """Test suite for upsert_field."""

    def test_create_from_mapping(self, resume_template):
        """Test creating a field from a camelCase mapping."""
        template = upsert_field(resume_template, "phone", {"label": "Phone", "inputKind": "phone"})
        assert template.fields["phone"].input_kind is InputKind.PHONE
        assert "phone" not in resume_template.fields

    def test_id_is_trimmed(self, resume_template):
        """Test that field ids are trimmed."""
        template = upsert_field(resume_template, "  phone ", FieldDefinition(label="Phone"))
        assert "phone" in template.fields

    def test_empty_id_rejected(self, resume_template):
        """Test that an empty field id is rejected."""
        with pytest.raises(ValidationError, match="Field ID is required."):
            upsert_field(resume_template, "   ", FieldDefinition(label="Blank"))

    def test_duplicate_id_rejected(self, resume_template):
        """Test that a duplicate field id is rejected."""
        with pytest.raises(ValidationError, match="Field ID must be unique."):
            upsert_field(resume_template, "email", FieldDefinition(label="Other"))

    def test_update_in_place(self, resume_template):
        """Test updating a field under its own id."""
        template = upsert_field(
            resume_template, "email", {"label": "E-mail", "required": True}, editing_id="email"
        )
        assert template.fields["email"].label == "E-mail"
        assert template.fields["email"].required is True

    def test_edit_with_new_id_renames(self, resume_template):
        """Test that editing under a new id renames the field."""
        template = upsert_field(
            resume_template, "contact_email", {"label": "Email"}, editing_id="email"
        )
        assert "email" not in template.fields
        assert bound_node_ids(template.root, "contact_email") == ["email-1", "email-2"]

    def test_edit_unknown_field(self, resume_template):
        """Test that editing an unknown field raises NotFoundError."""
        with pytest.raises(NotFoundError):
            upsert_field(resume_template, "x", {"label": "X"}, editing_id="missing")

    def test_invalid_definition(self, resume_template):
        """Test that an invalid definition raises ValidationError."""
        with pytest.raises(ValidationError):
            upsert_field(resume_template, "bad", {"maxLength": -3})

    def test_normalize_field_id(self):
        """Test field id normalization."""
        assert normalize_field_id(" name ") == "name"
        with pytest.raises(ValidationError):
            normalize_field_id(None)


# =============================================================================
# Rename / Remove
# =============================================================================


class TestRenameField:
    """Test suite for rename_field."""

    def test_rename_rewrites_bindings(self, resume_template):
        """Test that a rename rewrites every binding."""
        template = rename_field(resume_template, "email", "contact_email")
        assert find_node(template.root, "email-1").bind_field == "contact_email"
        assert find_node(template.root, "email-2").bind_field == "contact_email"
        assert find_dangling_bindings(template) == []

    def test_rename_keeps_registry_position(self, resume_template):
        """Test that a renamed field keeps its registry position."""
        template = rename_field(resume_template, "email", "contact_email")
        assert list(template.fields) == ["full_name", "contact_email", "role", "company"]

    def test_rename_to_existing_id(self, resume_template):
        """Test that renaming onto a registered id fails."""
        with pytest.raises(ValidationError):
            rename_field(resume_template, "email", "role")

    def test_rename_onto_stale_binding_rejected(self, resume_template):
        """Test that a rename cannot merge into leaves bound to an unregistered id."""
        template = resume_template.with_root(
            rewrite_bindings(resume_template.root, "full_name", "nickname")
        )
        assert find_dangling_bindings(template) == ["name"]

        with pytest.raises(ValidationError) as exc_info:
            rename_field(template, "email", "nickname")
        assert exc_info.value.details == ["node 'name' binds 'nickname'"]
        assert bound_node_ids(template.root, "email") == ["email-1", "email-2"]
        assert bound_node_ids(template.root, "nickname") == ["name"]

    def test_rename_missing_field(self, resume_template):
        """Test that renaming an unknown field raises NotFoundError."""
        with pytest.raises(NotFoundError):
            rename_field(resume_template, "missing", "other")

    def test_rename_to_same_id(self, resume_template):
        """Test that renaming to the same id is a no-op."""
        assert rename_field(resume_template, "email", "email") is resume_template


class TestRemoveField:
    """Test suite for remove_field."""

    def test_in_use_requires_cascade(self, resume_template):
        """Test that removing a bound field requires cascade."""
        with pytest.raises(ValidationError) as exc_info:
            remove_field(resume_template, "email")
        assert exc_info.value.details == ["email-1", "email-2"]

    def test_cascade_clears_bindings(self, resume_template):
        """Test that a cascading removal clears the bindings."""
        template = remove_field(resume_template, "email", cascade=True)
        assert "email" not in template.fields
        assert find_node(template.root, "email-1").bind_field is None
        assert find_node(template.root, "email-2").bind_field is None

    def test_unused_field_removed_without_cascade(self, resume_template):
        """Test that an unused field is removed directly."""
        template = upsert_field(resume_template, "phone", {"label": "Phone"})
        template = remove_field(template, "phone")
        assert "phone" not in template.fields

    def test_remove_missing_field(self, resume_template):
        """Test that removing an unknown field raises NotFoundError."""
        with pytest.raises(NotFoundError):
            remove_field(resume_template, "missing")

    def test_rename_then_delete_scenario(self, resume_template):
        """Test a rename followed by a cascading delete."""
        template = rename_field(resume_template, "email", "contact_email")
        assert bound_node_ids(template.root, "contact_email") == ["email-1", "email-2"]

        template = remove_field(template, "contact_email", cascade=True)
        assert bound_node_ids(template.root, "contact_email") == []
        assert find_node(template.root, "email-1").bind_field is None
        assert find_node(template.root, "email-2").bind_field is None
        assert find_dangling_bindings(template) == []


# =============================================================================
# Queries and value checks
# =============================================================================


class TestQueries:
    """Test suite for list_fields and get_field."""

    def test_list_fields_sorted(self, resume_template):
        """Test that fields are listed by id."""
        assert [field_id for field_id, _ in list_fields(resume_template)] == [
            "company", "email", "full_name", "role",
        ]

    def test_get_field(self, resume_template):
        """Test looking up a field by id."""
        assert get_field(resume_template, "role").label == "Role"
        with pytest.raises(NotFoundError):
            get_field(resume_template, "missing")


class TestValidateValue:
    """Test suite for validate_value."""

    def test_required(self):
        """Test the required check."""
        definition = FieldDefinition(label="Name", required=True)
        assert validate_value(definition, "  ") == ["Name is required."]
        assert validate_value(definition, "Ada") == []

    def test_max_length(self):
        """Test the max length check."""
        definition = FieldDefinition(label="Code", max_length=3)
        assert validate_value(definition, "abcd") == ["Code must be at most 3 characters."]

    def test_email(self):
        """Test the email format check."""
        definition = FieldDefinition(label="Email", input_kind="email")
        assert validate_value(definition, "nope") == ["Email must be an email address."]
        assert validate_value(definition, "a@b.c") == []
        assert validate_value(definition, "") == []

    def test_list_values(self):
        """Test checks on list values."""
        definition = FieldDefinition(label="Skills", required=True)
        assert validate_value(definition, ["go", "rust"]) == []
        assert validate_value(definition, []) == ["Skills is required."]
