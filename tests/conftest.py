"""Shared fixtures for the engine test suite."""

import pytest

from blockdoc.core.config import Settings
from blockdoc.models.fields import FieldDefinition
from blockdoc.models.nodes import ROOT_ID, ColumnNode, RepeatNode, SectionNode, TextNode
from blockdoc.models.template import TemplateDocument, create_empty_template


@pytest.fixture
def settings():
    """Settings with defaults only, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def make_template(settings):
    """Build a template from root children and field definitions."""

    def _make(*children, fields=None) -> TemplateDocument:
        template = create_empty_template("TMP_test", settings)
        root = ColumnNode(id=ROOT_ID, spacing=12, children=list(children))
        registry = {
            field_id: definition if isinstance(definition, FieldDefinition) else FieldDefinition(**definition)
            for field_id, definition in (fields or {}).items()
        }
        return template.with_fields(registry).with_root(root)

    return _make


@pytest.fixture
def resume_template(make_template):
    """Header and contact sections plus an experience repeat.

    Two leaves bind ``email``; the ``exp`` repeat holds a column bound to
    ``role`` and ``company``.
    """
    header = SectionNode(
        id="header",
        title="Header",
        children=[
            TextNode(id="name", bind_field="full_name", font_size_token="display"),
            TextNode(id="email-1", bind_field="email"),
        ],
    )
    contact = SectionNode(
        id="contact",
        title="Contact",
        children=[TextNode(id="email-2", bind_field="email")],
    )
    experience = SectionNode(
        id="experience",
        title="Experience",
        children=[
            RepeatNode(
                id="exp",
                label="Experience",
                children=[
                    ColumnNode(
                        id="exp-item",
                        children=[
                            TextNode(id="role-leaf", bind_field="role"),
                            TextNode(id="company-leaf", bind_field="company"),
                        ],
                    )
                ],
            )
        ],
    )
    return make_template(
        header,
        contact,
        experience,
        fields={
            "full_name": {"label": "Full Name"},
            "email": {"label": "Email", "input_kind": "email"},
            "role": {"label": "Role"},
            "company": {"label": "Company"},
        },
    )


@pytest.fixture
def exp_values():
    return {
        "full_name": "Ada Lovelace",
        "exp": [
            {"role": "A", "company": "X"},
            {"role": "B", "company": "Y"},
        ],
    }
