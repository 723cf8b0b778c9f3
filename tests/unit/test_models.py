"""Unit tests for template document models."""

import pytest

from blockdoc.core.errors import ValidationError
from blockdoc.models.fields import FieldDefinition, InputKind
from blockdoc.models.nodes import NODE_ADAPTER, ROOT_ID, RepeatNode, RowNode, TextNode
from blockdoc.models.template import (
    TemplateDocument,
    apply_template_overrides,
    check_schema_version,
    create_empty_template,
    hydrate_template,
)


# =============================================================================
# Defaults
# =============================================================================


class TestCreateEmptyTemplate:
    """Test suite for the default template."""

    def test_page_defaults(self, settings):
        """Test the default page setup."""
        template = create_empty_template(settings=settings)
        assert template.page.size == "A4"
        assert template.page.orientation == "portrait"
        assert template.page.margin_x == 32
        assert template.page.margin_y == 32

    def test_theme_defaults(self, settings):
        """Test the default theme tokens."""
        theme = create_empty_template(settings=settings).theme
        assert theme.fonts.heading == "Arial Black"
        assert theme.fonts.body == "Arial"
        assert theme.base_font_size == 14
        assert theme.line_height == 1.5
        assert theme.section_divider.enabled is True
        assert theme.font_scales == {"display": 1.6, "heading": 1.25, "body": 1.0, "meta": 0.85}
        assert set(theme.colors) == {"primary", "secondary", "accent", "muted", "meta"}

    def test_root_is_empty_column(self, settings):
        """Test that a new template has an empty root column."""
        template = create_empty_template(settings=settings)
        assert template.root.id == ROOT_ID
        assert template.root.type == "column"
        assert template.root.children == []

    def test_ids_are_generated(self, settings):
        """Test that template ids are generated and unique."""
        first = create_empty_template(settings=settings)
        second = create_empty_template(settings=settings)
        assert first.id.startswith("TMP_")
        assert first.id != second.id

    def test_schema_version_from_settings(self, settings):
        """Test that the schema version comes from settings."""
        assert create_empty_template(settings=settings).schema_version == settings.schema_version


# =============================================================================
# Serialization
# =============================================================================


class TestSerialization:
    """Test suite for to_document / from_document."""

    def test_document_uses_camel_case(self, resume_template):
        """Test that documents use camelCase keys."""
        document = resume_template.to_document()
        assert document["schemaVersion"] == "builder-v1"
        assert document["page"]["marginX"] == 32
        assert document["theme"]["baseFontSize"] == 14
        assert document["fields"]["email"]["inputKind"] == "email"

    def test_document_keeps_unset_values_as_null(self, resume_template):
        """Test that unset optional attributes serialize as explicit nulls."""
        document = resume_template.to_document()
        header = document["layout"]["root"]["children"][0]
        name_leaf = header["children"][0]
        assert name_leaf["bindField"] == "full_name"
        assert name_leaf["icon"] is None
        assert name_leaf["colorToken"] is None

    def test_round_trip(self, resume_template):
        """Test that a template survives to_document and from_document unchanged."""
        restored = TemplateDocument.from_document(resume_template.to_document())
        assert restored == resume_template

    def test_round_trip_keeps_cleared_defaults(self, resume_template):
        """Test that a None overriding a non-None default is not restored to the default."""
        theme = resume_template.theme.model_copy(
            update={
                "section_title_style": resume_template.theme.section_title_style.model_copy(
                    update={"color_token": None}
                )
            }
        )
        template = resume_template.model_copy(update={"theme": theme})

        restored = TemplateDocument.from_document(template.to_document())
        assert restored.theme.section_title_style.color_token is None
        assert hydrate_template(template.to_document()).theme.section_title_style.color_token is None

    def test_legacy_input_types(self):
        """Test that legacy input type names are mapped."""
        template = hydrate_template(
            {
                "fields": {
                    "bio": {"label": "Bio", "inputType": "textarea"},
                    "skills": {"label": "Skills", "inputType": "inline-chips"},
                    "tasks": {"label": "Tasks", "inputType": "inline-bullets"},
                }
            }
        )
        assert template.fields["bio"].input_kind is InputKind.MULTILINE
        assert template.fields["skills"].input_kind is InputKind.LIST_CHIPS
        assert template.fields["tasks"].input_kind is InputKind.LIST_BULLETS

    def test_legacy_style_spacing(self):
        """Test that legacy style spacing is lifted onto the node."""
        node = NODE_ADAPTER.validate_python({"type": "row", "id": "r1", "style": {"spacing": 8}})
        assert isinstance(node, RowNode)
        assert node.spacing == 8

    def test_invalid_document_raises(self):
        """Test that an invalid document raises ValidationError with details."""
        with pytest.raises(ValidationError) as exc_info:
            TemplateDocument.from_document({"page": {"size": "A3"}})
        assert exc_info.value.details

    def test_unknown_node_attribute_rejected(self):
        """Test that unknown node attributes are rejected."""
        with pytest.raises(ValidationError):
            TemplateDocument.from_document(
                {"layout": {"root": {"id": "root", "type": "column", "children": [
                    {"id": "t1", "type": "text", "colour": "red"}
                ]}}}
            )


# =============================================================================
# Layout invariants
# =============================================================================


class TestLayoutInvariants:
    """Test suite for tree-level validation."""

    def test_duplicate_ids_rejected(self):
        """Test that duplicate node ids are rejected."""
        with pytest.raises(ValidationError):
            TemplateDocument.from_document(
                {"layout": {"root": {"id": "root", "type": "column", "children": [
                    {"id": "dup", "type": "text"},
                    {"id": "dup", "type": "text"},
                ]}}}
            )

    def test_root_id_reserved(self):
        """Test that the root must use the reserved id."""
        with pytest.raises(ValidationError):
            TemplateDocument.from_document(
                {"layout": {"root": {"id": "main", "type": "column"}}}
            )

    def test_leaf_root_rejected(self):
        """Test that a leaf cannot be the root."""
        with pytest.raises(ValidationError):
            TemplateDocument.from_document({"layout": {"root": {"id": "root", "type": "text"}}})

    def test_repeat_with_two_children_rejected(self):
        """Test that a repeat holds at most one child."""
        with pytest.raises(Exception, match="repeat accepts exactly one child template"):
            RepeatNode(
                id="rep",
                children=[TextNode(id="a"), TextNode(id="b")],
            )

    def test_blank_node_id_rejected(self):
        """Test that blank node ids are rejected."""
        with pytest.raises(Exception, match="node id must not be empty"):
            TextNode(id="   ")

    def test_empty_binding_means_unbound(self):
        """Test that an empty binding is stored as None."""
        assert TextNode(id="t", bind_field="").bind_field is None


# =============================================================================
# Fields
# =============================================================================


class TestFieldDefinition:
    """Test suite for FieldDefinition parsing."""

    def test_text_is_stripped(self):
        """Test that free-text attributes are trimmed."""
        definition = FieldDefinition(label="  Name  ", placeholder=" Jane ")
        assert definition.label == "Name"
        assert definition.placeholder == "Jane"

    def test_empty_max_length_is_no_limit(self):
        """Test that an empty max length means no limit."""
        assert FieldDefinition.model_validate({"maxLength": ""}).max_length is None

    def test_non_positive_max_length_rejected(self):
        """Test that max length must be positive."""
        with pytest.raises(Exception):
            FieldDefinition(max_length=0)

    def test_display_label_fallback(self):
        """Test the display label of an unlabelled field."""
        assert FieldDefinition().display_label == "Untitled"


# =============================================================================
# Hydration and overrides
# =============================================================================


class TestHydration:
    """Test suite for hydrate_template and apply_template_overrides."""

    def test_partial_theme_merged_over_defaults(self):
        """Test that a partial theme is merged over the defaults."""
        template = hydrate_template({"theme": {"baseFontSize": 16}})
        assert template.theme.base_font_size == 16
        assert template.theme.fonts.heading == "Arial Black"

    def test_layout_without_root_uses_default(self):
        """Test that a layout without root falls back to the default."""
        template = hydrate_template({"layout": {}})
        assert template.root.id == ROOT_ID

    def test_empty_input(self):
        """Test hydrating None."""
        assert hydrate_template(None).root.children == []

    def test_overrides_merge_nested_colors(self, resume_template):
        """Test that color overrides merge with existing colors."""
        updated = apply_template_overrides(
            resume_template, {"theme": {"colors": {"accent": "#ff0000"}}}
        )
        assert updated.theme.colors["accent"] == "#ff0000"
        assert updated.theme.colors["primary"] == resume_template.theme.colors["primary"]

    def test_overrides_merge_fonts_and_page(self, resume_template):
        """Test that font and page overrides merge key by key."""
        updated = apply_template_overrides(
            resume_template,
            {"page": {"orientation": "landscape"}, "theme": {"fonts": {"body": "Georgia"}}},
        )
        assert updated.page.orientation == "landscape"
        assert updated.page.size == "A4"
        assert updated.theme.fonts.body == "Georgia"
        assert updated.theme.fonts.heading == "Arial Black"

    def test_no_overrides_returns_same_template(self, resume_template):
        """Test that no overrides returns the same template."""
        assert apply_template_overrides(resume_template, None) is resume_template

    @pytest.mark.parametrize(
        "raw",
        [{"page": "A4"}, {"theme": ["dark"]}, {"fields": "email"}, {"layout": "root"}, ["page"]],
    )
    def test_non_mapping_sections_rejected(self, raw):
        """Test that malformed sections surface as ValidationError, not TypeError."""
        with pytest.raises(ValidationError):
            hydrate_template(raw)

    def test_null_sections_use_defaults(self):
        """Test that null page and theme entries fall back to the defaults."""
        template = hydrate_template({"page": None, "theme": None})
        assert template.page.size == "A4"
        assert template.theme.base_font_size == 14

    @pytest.mark.parametrize(
        "overrides",
        [{"page": "Letter"}, {"theme": 3}, {"theme": {"colors": "red"}}, ["theme"]],
    )
    def test_non_mapping_overrides_rejected(self, resume_template, overrides):
        """Test that malformed overrides raise ValidationError."""
        with pytest.raises(ValidationError):
            apply_template_overrides(resume_template, overrides)


class TestSchemaVersion:
    """Test suite for check_schema_version."""

    def test_current_version_accepted(self, settings):
        """Test that the current schema version passes."""
        check_schema_version({"schemaVersion": "builder-v1"}, settings)

    def test_other_version_rejected(self, settings):
        """Test that another schema version is rejected."""
        with pytest.raises(ValidationError, match="Unsupported template schema version"):
            check_schema_version({"schemaVersion": "legacy"}, settings)

    def test_missing_version_rejected(self, settings):
        """Test that a missing schema version is rejected."""
        with pytest.raises(ValidationError):
            check_schema_version({}, settings)

    def test_non_mapping_document_rejected(self, settings):
        """Test that a document that is not an object raises ValidationError."""
        with pytest.raises(ValidationError):
            check_schema_version("builder-v1", settings)
