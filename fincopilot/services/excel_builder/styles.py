"""
Styles and colorways for generated workbooks.

A style fixes fonts, borders and alignment; a colorway supplies the fills.
``apply_colorway_to_style`` combines the two.
"""
from dataclasses import dataclass, replace
from typing import Dict, Optional

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

CURRENCY_FORMAT = "#,##0.00"
PERCENT_FORMAT = "0.0%"
MULTIPLE_FORMAT = "0.00"
MILLIONS_FORMAT = "#,##0.0"
DOLLAR_MILLIONS_FORMAT = "$#,##0.0"
PRICE_FORMAT = "$0.00"
RATIO_FORMAT = "0.0"
FACTOR_FORMAT = "0.000"
TIMES_FORMAT = '0.0"x"'


@dataclass(frozen=True)
class StyleConfig:
    """Fonts, fills, borders and alignment for one style variant."""

    name: str
    title_font: Font
    header_font: Font
    section_font: Font
    item_font: Font
    header_fill: Optional[PatternFill] = None
    section_fill: Optional[PatternFill] = None
    forecast_fill: Optional[PatternFill] = None
    highlight_fill: Optional[PatternFill] = None
    header_border: Optional[Border] = None
    label_alignment: Optional[Alignment] = None
    value_alignment: Optional[Alignment] = None


@dataclass(frozen=True)
class Colorway:
    """Color palette (hex without #)."""

    name: str
    primary: str
    secondary: str
    highlight: str
    text_on_primary: str = "FFFFFF"


STYLES: Dict[str, StyleConfig] = {
    "basic": StyleConfig(
        name="Basic",
        title_font=Font(bold=True, size=14),
        header_font=Font(bold=True, size=11),
        section_font=Font(bold=True, size=11),
        item_font=Font(size=10),
        header_border=Border(bottom=Side(style="thin", color="000000")),
        label_alignment=Alignment(horizontal="left", vertical="center"),
        value_alignment=Alignment(horizontal="right", vertical="center"),
    ),
    "corporate": StyleConfig(
        name="Corporate",
        title_font=Font(bold=True, size=16),
        header_font=Font(bold=True, size=11, color="FFFFFF"),
        section_font=Font(bold=True, size=11, color="FFFFFF"),
        item_font=Font(size=10),
        header_fill=PatternFill("solid", fgColor="1565C0"),
        section_fill=PatternFill("solid", fgColor="1E88E5"),
        forecast_fill=PatternFill("solid", fgColor="E3F2FD"),
        header_border=Border(bottom=Side(style="medium", color="FFFFFF")),
        label_alignment=Alignment(horizontal="left", vertical="center", indent=1),
        value_alignment=Alignment(horizontal="right", vertical="center"),
    ),
}


COLORWAYS: Dict[str, Colorway] = {
    "blue": Colorway(name="Blue", primary="1565C0", secondary="1E88E5", highlight="E3F2FD"),
    "green": Colorway(name="Green", primary="2E7D32", secondary="4CAF50", highlight="E8F5E9"),
    "slate": Colorway(name="Slate", primary="37474F", secondary="546E7A", highlight="ECEFF1"),
}


def apply_colorway_to_style(style: StyleConfig, colorway: Colorway) -> StyleConfig:
    """Return ``style`` with its fills (and the fonts drawn on them) recolored."""
    def recolor(fill: Optional[PatternFill], color: str) -> Optional[PatternFill]:
        return PatternFill("solid", fgColor=color) if fill else None

    def on_fill(font: Font, fill: Optional[PatternFill]) -> Font:
        if not fill:
            return font
        return Font(bold=font.bold, italic=font.italic, size=font.size, color=colorway.text_on_primary)

    return replace(
        style,
        name=f"{style.name} - {colorway.name}",
        header_font=on_fill(style.header_font, style.header_fill),
        section_font=on_fill(style.section_font, style.section_fill),
        header_fill=recolor(style.header_fill, colorway.primary),
        section_fill=recolor(style.section_fill, colorway.secondary),
        forecast_fill=recolor(style.forecast_fill, colorway.highlight),
        # Key model outputs are shaded in every style
        highlight_fill=PatternFill("solid", fgColor=colorway.highlight),
    )


def resolve_style(style: str, colorway: str) -> StyleConfig:
    """Look up a style and colorway by name, falling back to basic/blue."""
    return apply_colorway_to_style(
        STYLES.get(style, STYLES["basic"]),
        COLORWAYS.get(colorway, COLORWAYS["blue"]),
    )
