"""Page and theme models.

The theme holds the template-level typography and color tokens. Size
and color tokens on nodes are resolved against it at render time, so a
single edit here rescales or recolors the whole document.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PageSize = Literal["A4", "Letter", "Legal"]
Orientation = Literal["portrait", "landscape"]
BorderStyle = Literal["solid", "dashed", "dotted", "double", "none"]
SizeToken = Literal["display", "heading", "body", "meta"]

SIZE_TOKENS: tuple[str, ...] = ("display", "heading", "body", "meta")
COLOR_TOKENS: tuple[str, ...] = ("primary", "secondary", "accent", "meta")

DEFAULT_FONT_SCALES: dict[str, float] = {
    "display": 1.6,
    "heading": 1.25,
    "body": 1.0,
    "meta": 0.85,
}

DEFAULT_COLORS: dict[str, str] = {
    "primary": "#000000",
    "secondary": "#1f2937",
    "accent": "#2563EB",
    "muted": "#666",
    "meta": "#475569",
}


class ThemeModel(BaseModel):
    """Shared configuration for page and theme models.

    Unknown keys are ignored so documents written by older builders
    still load.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DividerStyle(ThemeModel):
    """A horizontal rule."""

    enabled: bool = False
    width: int = Field(default=1, ge=0)
    style: BorderStyle = "solid"
    color: str = "#e2e8f0"
    spacing: int | None = Field(default=None, ge=0)
    inset: int | None = Field(default=None, ge=0)


class PageBorder(ThemeModel):
    """Border drawn around the printable page."""

    enabled: bool = False
    width: int = Field(default=1, ge=0)
    color: str = "#e5e7eb"
    style: BorderStyle = "solid"


class Page(ThemeModel):
    """Printable page configuration."""

    size: PageSize = "A4"
    orientation: Orientation = "portrait"
    background_color: str = "#ffffff"
    margin_x: int = Field(default=32, ge=0)
    margin_y: int = Field(default=32, ge=0)
    padding_x: int = Field(default=0, ge=0)
    padding_y: int = Field(default=0, ge=0)
    border: PageBorder = Field(default_factory=PageBorder)


class Fonts(ThemeModel):
    """Font families for headings and body text."""

    heading: str = "Arial Black"
    body: str = "Arial"


class TitleStyle(ThemeModel):
    """Default typography of section titles."""

    font_size_token: SizeToken = "heading"
    color_token: str | None = "primary"
    font_weight: str = "600"
    font_style: Literal["normal", "italic"] = "normal"
    text_transform: Literal["none", "uppercase", "lowercase", "capitalize"] = "none"


class Theme(ThemeModel):
    """Template-level typography, color and spacing tokens."""

    fonts: Fonts = Field(default_factory=Fonts)
    base_font_size: int = Field(default=14, gt=0)
    line_height: float = Field(default=1.5, gt=0)
    gap: int = Field(default=12, ge=0)
    section_gap: int = Field(default=12, ge=0)
    section_divider: DividerStyle = Field(
        default_factory=lambda: DividerStyle(enabled=True)
    )
    section_title_style: TitleStyle = Field(default_factory=TitleStyle)
    section_title_divider: DividerStyle = Field(
        default_factory=lambda: DividerStyle(spacing=6)
    )
    row_divider: DividerStyle = Field(default_factory=lambda: DividerStyle(inset=0))
    row_divider_spacing: int = Field(default=6, ge=0)
    repeat_item_gap: int = Field(default=12, ge=0)
    font_scales: dict[str, Annotated[float, Field(gt=0)]] = Field(
        default_factory=lambda: dict(DEFAULT_FONT_SCALES)
    )
    colors: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COLORS))
