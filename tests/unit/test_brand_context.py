from brandhub.db.repositories import colors as color_repo
from brandhub.db.repositories import content as content_repo
from brandhub.db.repositories import tools as tool_repo
from brandhub.services.brand_context import (
    DEFAULT_BRAND_NAME,
    BrandColors,
    assemble_brand_context,
    brand_name,
    get_brand_colors,
    get_primary_logo_url,
)


def _add(db, category, *colors):
    palette = color_repo.ensure_palette(db, category, f"{category.capitalize()} Colors")
    for name, hex_value in colors:
        color_repo.add_color(db, palette, {"name": name, "hex": hex_value})
    return palette


def test_brand_name_default_and_override(monkeypatch):
    assert brand_name() == DEFAULT_BRAND_NAME
    monkeypatch.setenv("BRAND_NAME", "Acme")
    assert brand_name() == "Acme"


def test_brand_colors_default_without_palettes(db):
    assert get_brand_colors(db) == BrandColors()


def test_brand_colors_map_flattened_positions(db):
    _add(db, "secondary", ("Forest", "#00FF00"), ("Sand", "#EEEEEE"))
    _add(db, "primary", ("Clay", "#AA0000"), ("Ink", "#111111"))

    colors = get_brand_colors(db)

    assert colors.primary == "#AA0000"
    assert colors.text == "#111111"
    assert colors.secondary == "#00FF00"
    assert colors.background == "#EEEEEE"
    # fifth position missing: default accent
    assert colors.accent == BrandColors().accent
    assert [c["name"] for c in colors.all] == ["Clay", "Ink", "Forest", "Sand"]


def test_context_falls_back_to_default_colors(db):
    context = assemble_brand_context(db)
    assert context.startswith("# Brand Guidelines Context")
    assert "- Red Clay: #802A02" in context
    assert "## Available Brand Assets" in context
    assert "## Available Brand Tools" not in context


def test_context_lists_palettes_sections_and_tools(db):
    palette = _add(db, "primary", ("Clay", "#AA0000"))
    color_repo.add_color(db, palette, {"name": "Ink", "hex": "#111111", "pantone": "Black C", "cmyk": {"c": 0, "m": 0, "y": 0, "k": 100}})
    content_repo.upsert_section(db, section="brand-voice", title="Brand Voice", content="Warm and direct.")
    tool_repo.upsert_by_slug(db, slug="risograph", values={"title": "Risograph", "description": "Print effects", "html_code": "<div></div>"})

    context = assemble_brand_context(db)

    assert "### Primary Colors" in context
    assert "- **Clay**: #AA0000 | RGB(170, 0, 0)" in context
    assert "CMYK(0, 0, 0, 100) | Pantone: Black C" in context
    assert "## Brand Voice\nWarm and direct." in context
    assert "- **Risograph** (slug: risograph): Print effects" in context


def test_primary_logo_url_none_without_logos(db):
    assert get_primary_logo_url(db) is None
