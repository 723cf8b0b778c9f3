"""Field definitions.

A field is a named, typed data slot that the author defines once and
binds to one or more leaf nodes. Fields live in the template's
``fields`` map keyed by their id.
"""

import enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class InputKind(str, enum.Enum):
    """Kind of form control used to fill a field."""

    TEXT = "text"
    MULTILINE = "multiline"
    LIST_BULLETS = "list-bullets"
    LIST_CHIPS = "list-chips"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    DATE = "date"


# Values written by older builder versions
LEGACY_INPUT_KINDS = {
    "textarea": InputKind.MULTILINE,
    "inline-bullets": InputKind.LIST_BULLETS,
    "inline-chips": InputKind.LIST_CHIPS,
}


class FieldDefinition(BaseModel):
    """Definition of a single field.

    The id is not part of the definition; it is the key under which the
    definition is stored in ``TemplateDocument.fields``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    label: str = Field(default="", description="Human readable label")
    description: str = Field(default="", description="Help text shown under the control")
    placeholder: str = Field(default="", description="Shown while the field is empty")
    input_kind: InputKind = Field(
        default=InputKind.TEXT,
        validation_alias=AliasChoices("inputKind", "input_kind", "inputType"),
        serialization_alias="inputKind",
        description="Form control kind",
    )
    required: bool = Field(default=False)
    max_length: int | None = Field(default=None, gt=0)

    @field_validator("label", "description", "placeholder", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace from free-text attributes."""
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("input_kind", mode="before")
    @classmethod
    def map_legacy_kind(cls, v: Any) -> Any:
        """Accept the input type names used by older documents."""
        if v in (None, ""):
            return InputKind.TEXT
        return LEGACY_INPUT_KINDS.get(v, v)

    @field_validator("max_length", mode="before")
    @classmethod
    def empty_max_length(cls, v: Any) -> Any:
        """Treat an empty string as no limit."""
        return None if v == "" else v

    @property
    def display_label(self) -> str:
        """Label, or a neutral fallback for unlabeled fields."""
        return self.label or "Untitled"
