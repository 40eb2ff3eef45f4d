"""Brand data assembled for the chat assistant and document generators."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from brandhub.db import models
from brandhub.db.repositories import assets as asset_repo
from brandhub.db.repositories import colors as color_repo
from brandhub.db.repositories import content as content_repo
from brandhub.db.repositories import tools as tool_repo

DEFAULT_BRAND_NAME = "Caravan"

# (name, hex) in palette order; used when no palette has been stored yet
DEFAULT_COLORS = [
    ("Red Clay", "#802A02"),
    ("Black", "#131313"),
    ("Forest Green", "#2B3901"),
    ("Off-white", "#F0EEE0"),
    ("Desert Mauve", "#EEC8B3"),
]


def brand_name() -> str:
    return os.getenv("BRAND_NAME") or DEFAULT_BRAND_NAME


@dataclass
class BrandColors:
    primary: str = "#802A02"
    secondary: str = "#2B3901"
    background: str = "#F0EEE0"
    text: str = "#131313"
    accent: str = "#EEC8B3"
    all: List[Dict[str, Optional[str]]] = field(default_factory=list)


def _palettes(db: Session) -> List[models.ColorPalette]:
    # Ordered by category so primary colors come first
    return sorted(color_repo.list_palettes(db, active_only=False), key=lambda p: p.category)


def _color_line(color: models.PaletteColor) -> str:
    line = f"- **{color.name}**: {color.hex}"
    rgb = color.rgb or {}
    if rgb:
        line += f" | RGB({rgb.get('r')}, {rgb.get('g')}, {rgb.get('b')})"
    cmyk = color.cmyk or {}
    if cmyk:
        line += f" | CMYK({cmyk.get('c')}, {cmyk.get('m')}, {cmyk.get('y')}, {cmyk.get('k')})"
    if color.pantone:
        line += f" | Pantone: {color.pantone}"
    return line


def assemble_brand_context(db: Session) -> str:
    """Markdown block describing colors, written guidelines, assets and tools."""
    lines = ["# Brand Guidelines Context", "", "## Brand Colors"]

    palettes = _palettes(db)
    if palettes:
        for palette in palettes:
            lines.append("")
            lines.append(f"### {palette.title or palette.category.capitalize() + ' Colors'}")
            if palette.description:
                lines.append(palette.description)
            lines.extend(_color_line(color) for color in palette.colors)
    else:
        lines.extend(f"- {name}: {hex_value}" for name, hex_value in DEFAULT_COLORS)

    for section in content_repo.list_sections(db):
        lines.append("")
        lines.append(f"## {section.title}")
        lines.append(section.content or "Not yet defined.")

    lines.append("")
    lines.append("## Available Brand Assets")
    by_section: Dict[str, List[str]] = {}
    for asset in sorted(asset_repo.list_active_by_order(db), key=lambda a: a.section):
        file_types = ", ".join(f.file_type for f in asset.files)
        by_section.setdefault(asset.section, []).append(f"{asset.title} ({file_types or 'no files'})")
    for section, items in by_section.items():
        lines.append("")
        lines.append(f"### {section.capitalize()}")
        lines.extend(f"- {item}" for item in items)

    tools = tool_repo.list_tools(db)
    if tools:
        lines.append("")
        lines.append("## Available Brand Tools")
        for tool in tools:
            lines.append(f"- **{tool.title}** (slug: {tool.slug}): {tool.description or 'Interactive brand tool'}")

    return "\n".join(lines) + "\n"


def get_brand_colors(db: Session) -> BrandColors:
    """Role colors for generated documents.

    Flattened palette colors map by position: 0 primary, 1 text,
    2 secondary, 3 background, 4 accent. Missing positions keep the defaults.
    """
    palettes = _palettes(db)
    if not palettes:
        return BrandColors()

    flat = color_repo.flatten_colors(palettes)
    defaults = BrandColors()

    def _hex_at(index: int, fallback: str) -> str:
        return flat[index].hex if len(flat) > index and flat[index].hex else fallback

    return BrandColors(
        primary=_hex_at(0, defaults.primary),
        text=_hex_at(1, defaults.text),
        secondary=_hex_at(2, defaults.secondary),
        background=_hex_at(3, defaults.background),
        accent=_hex_at(4, defaults.accent),
        all=[{"name": c.name, "hex": c.hex, "pantone": c.pantone} for c in flat],
    )


def get_primary_logo_url(db: Session) -> Optional[str]:
    logo = asset_repo.get_primary_logo(db)
    if logo is None:
        return None
    return asset_repo.display_url(logo)
