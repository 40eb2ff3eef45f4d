import io
from types import SimpleNamespace

import pytest
from pypdf import PdfWriter

from brandhub.db.repositories import colors as color_repo
from brandhub.db.repositories import content as content_repo
from brandhub.services.guidelines_service import (
    GuidelineExtractionError,
    brand_voice_markdown,
    extract_from_images,
    extract_from_pdf,
    extract_pdf_text,
    save_brand_guidelines,
)
from brandhub.utils.uploads import UploadedFile

EXTRACTED_JSON = """Here you go:
```json
{"colors": [{"name": "Red Clay", "hex": "#802a02", "rgb": "128, 42, 2", "category": "primary"}],
 "fonts": [], "brandVoice": {}, "applications": []}
```"""


def _blank_pdf():
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def test_extract_pdf_text_rejects_garbage():
    with pytest.raises(GuidelineExtractionError):
        extract_pdf_text(b"definitely not a pdf")


def test_extract_from_pdf_parses_fenced_json(fake_llm, replies):
    llm = fake_llm(replies.message(replies.text(EXTRACTED_JSON)))

    extracted = extract_from_pdf(llm, _blank_pdf())

    assert extracted["colors"][0]["name"] == "Red Clay"
    call = llm.fake_messages.calls[0]
    assert call["model"] == llm.config.extraction_model
    assert "brand guidelines document text" in call["messages"][0]["content"]


def test_extract_from_images_sends_base64_blocks(fake_llm, replies):
    llm = fake_llm(replies.message(replies.text('{"colors": []}')))
    images = [
        UploadedFile(filename="a.jpg", content_type="image/jpg", data=b"\xff\xd8"),
        UploadedFile(filename="b.png", content_type="image/png", data=b"\x89PNG"),
    ]

    assert extract_from_images(llm, images) == {"colors": []}

    blocks = llm.fake_messages.calls[0]["messages"][0]["content"]
    assert [b["type"] for b in blocks] == ["image", "image", "text"]
    assert blocks[0]["source"]["media_type"] == "image/jpeg"
    assert blocks[1]["source"]["data"] == "iVBORw=="


def test_unparseable_reply_raises(fake_llm, replies):
    llm = fake_llm(replies.message(replies.text("I could not read that document.")))
    with pytest.raises(GuidelineExtractionError):
        extract_from_images(llm, [UploadedFile("a.png", "image/png", b"x")])


def test_save_colors_maps_categories_and_skips_invalid_hex(db):
    summary = save_brand_guidelines(db, {
        "colors": [
            {"name": "Red Clay", "hex": "#802a02", "rgb": "128, 42, 2", "cmyk": "C0 M67 Y100 K50", "category": "primary"},
            {"name": "Mauve", "hex": "#EEC8B3", "category": "accent"},
            {"name": "Mystery", "hex": "#123456", "category": "neon"},
            {"name": "Broken", "hex": "blue", "category": "secondary"},
            "not-a-dict",
        ]
    })

    assert summary.colors == 3
    primary = color_repo.get_palette(db, "primary")
    assert [c.name for c in primary.colors] == ["Red Clay", "Mystery"]
    assert primary.colors[0].hex == "#802A02"
    assert primary.colors[0].rgb == {"r": 128, "g": 42, "b": 2}
    assert primary.colors[0].cmyk == {"c": 0, "m": 67, "y": 100, "k": 50}
    assert [c.name for c in color_repo.get_palette(db, "tertiary").colors] == ["Mauve"]
    assert color_repo.get_palette(db, "secondary") is None


def test_save_colors_tolerates_malformed_fields(db):
    summary = save_brand_guidelines(db, {
        "colors": [
            {"name": 7, "hex": "#FFFFFF"},
            {"name": "Listed", "hex": "#000000", "category": ["primary", "secondary"]},
            {"name": "Numeric", "hex": 123456},
            {"name": "Navy", "hex": "#1A2B3C", "pantone": 2965},
        ]
    })

    assert summary.colors == 3
    primary = color_repo.get_palette(db, "primary")
    assert [c.name for c in primary.colors] == ["7", "Listed", "Navy"]
    assert primary.colors[-1].pantone == "2965"


def test_save_skips_colors_that_fail_to_write(db, monkeypatch):
    real_add_color = color_repo.add_color
    calls = {"n": 0}

    def _flaky_add_color(session, palette, payload):
        calls["n"] += 1
        if calls["n"] == 1:
            raise ValueError("bad value")
        return real_add_color(session, palette, payload)

    monkeypatch.setattr(color_repo, "add_color", _flaky_add_color)
    summary = save_brand_guidelines(db, {
        "colors": [{"name": "First", "hex": "#111111"}, {"name": "Second", "hex": "#222222"}],
    })

    assert summary.colors == 1
    assert [c.name for c in color_repo.get_palette(db, "primary").colors] == ["Second"]


def test_save_writes_content_sections(db):
    summary = save_brand_guidelines(db, {
        "fonts": [{"name": "Inter", "weights": ["regular", "bold"], "usage": "Body copy"}],
        "brandVoice": {"personality": ["Warm"], "tone": "Direct", "messaging": ["Go outside"], "values": ["Care"]},
        "applications": [{"type": "Signage", "description": "Store signs", "guidelines": "Use the mark"}],
    })

    assert summary.as_dict() == {"colors": 0, "fonts": 1, "brand_voice": True, "applications": 1}
    typography = content_repo.get_section(db, "typography")
    assert "### Inter" in typography.content
    assert "**Weights**: regular, bold" in typography.content
    assert "## Tone of Voice\n\nDirect" in content_repo.get_section(db, "brand-voice").content
    assert "### Signage" in content_repo.get_section(db, "applications").content


def test_save_ignores_empty_extraction(db):
    summary = save_brand_guidelines(db, {"colors": [], "fonts": [], "brandVoice": {}, "applications": []})
    assert summary.as_dict() == {"colors": 0, "fonts": 0, "brand_voice": False, "applications": 0}
    assert content_repo.list_sections(db) == []


def test_brand_voice_markdown_tolerates_scalars():
    text = brand_voice_markdown({"personality": "Bold", "messaging": None})
    assert "## Brand Personality\n\nBold" in text
    assert "## Key Messages\n\n\n" in text
