"""Brand guideline import.

A guidelines PDF (text extracted with pypdf) or a set of screenshots is sent
to the extraction model, which answers with structured JSON. The result is
written into palettes and content sections.
"""
from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brandhub.db import models
from brandhub.db.repositories import colors as color_repo
from brandhub.db.repositories import content as content_repo
from brandhub.services.llm import LLMClient, LLMRequestError, extract_json, response_text
from brandhub.utils.colors import is_valid_hex, normalize_hex, parse_cmyk, parse_rgb
from brandhub.utils.uploads import UploadedFile

logger = logging.getLogger(__name__)

EXTRACTION_MAX_TOKENS = 4096
CATEGORY_ALIASES = {"accent": "tertiary"}
# Errors that skip one extracted item instead of failing the import
_ITEM_ERRORS = (SQLAlchemyError, TypeError, ValueError, AttributeError)

_EXTRACTION_FORMAT = """Please respond with a valid JSON object in this exact format:
{
  "colors": [
    {
      "name": "Color Name",
      "hex": "#000000",
      "rgb": "0, 0, 0",
      "cmyk": "0, 0, 0, 100",
      "pantone": "Pantone 000 C",
      "category": "primary|secondary|accent"
    }
  ],
  "fonts": [
    {
      "name": "Font Family Name",
      "weights": ["regular", "bold", "light"],
      "usage": "Description of usage"
    }
  ],
  "brandVoice": {
    "personality": ["trait1", "trait2"],
    "tone": "Description of tone",
    "messaging": ["key message 1", "key message 2"],
    "values": ["value 1", "value 2"],
    "guidelines": "General communication guidelines"
  },
  "applications": [
    {
      "type": "Type of application",
      "description": "Description",
      "guidelines": "Specific guidelines"
    }
  ]
}

If you cannot find certain information, use empty arrays [] or empty strings "". Be as thorough as possible in extracting all available information."""


def _extraction_prompt(source: str, hex_hint: str) -> str:
    return f"""You are a brand guideline extraction expert. Analyze the provided brand guidelines {source} and extract the following information in a structured JSON format:

1. **Brand Colors**: Extract all brand colors with their values
   - Name of the color
   - HEX value ({hex_hint})
   - RGB values (if available)
   - CMYK values (if available)
   - Pantone code (if available)
   - Usage context (primary, secondary, accent, etc.)

2. **Typography/Fonts**: Extract all font information
   - Font family name
   - Font weights used
   - Usage context (headings, body, special uses)
   - Any specific guidelines about font usage

3. **Brand Voice & Messaging**: Extract brand voice, tone, and messaging guidelines
   - Brand personality traits
   - Tone of voice guidelines
   - Key messaging points
   - Brand values
   - Do's and Don'ts for communication

4. **Brand Applications**: Extract any information about brand applications
   - Logo usage guidelines
   - Templates mentioned
   - Application examples
   - Use cases

{_EXTRACTION_FORMAT}"""


PDF_PROMPT = _extraction_prompt("document", "if available")
IMAGES_PROMPT = _extraction_prompt("screenshots", "if available or if you can see the color, estimate the hex")


class GuidelineExtractionError(RuntimeError):
    """Raised when a document cannot be read or the model reply cannot be parsed."""


@dataclass
class SaveSummary:
    colors: int = 0
    fonts: int = 0
    brand_voice: bool = False
    applications: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "colors": self.colors,
            "fonts": self.fonts,
            "brand_voice": self.brand_voice,
            "applications": self.applications,
        }


def extract_pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, OSError) as exc:
        raise GuidelineExtractionError(f"Failed to read PDF: {exc}") from exc
    text = "\n".join(pages)
    logger.info("guidelines_pdf_text: pages=%d chars=%d", len(pages), len(text))
    return text


def _parse_reply(response) -> Dict[str, Any]:
    try:
        return extract_json(response_text(response))
    except ValueError as exc:
        raise GuidelineExtractionError(str(exc)) from exc


def extract_from_pdf(client: LLMClient, data: bytes) -> Dict[str, Any]:
    text = extract_pdf_text(data)
    content = f"{PDF_PROMPT}\n\nHere is the brand guidelines document text:\n\n{text}"
    try:
        response = client.create_message(
            model=client.config.extraction_model,
            max_tokens=EXTRACTION_MAX_TOKENS,
            messages=[{"role": "user", "content": content}],
        )
    except LLMRequestError as exc:
        raise GuidelineExtractionError(str(exc)) from exc
    return _parse_reply(response)


def extract_from_images(client: LLMClient, images: Iterable[UploadedFile]) -> Dict[str, Any]:
    blocks: List[Dict[str, Any]] = [
        {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": "image/jpeg" if image.content_type == "image/jpg" else image.content_type,
                "data": base64.b64encode(image.data).decode("ascii"),
            },
        }
        for image in images
    ]
    blocks.append({"type": "text", "text": IMAGES_PROMPT})
    logger.info("guidelines_images: count=%d", len(blocks) - 1)
    try:
        response = client.create_message(
            model=client.config.extraction_model,
            max_tokens=EXTRACTION_MAX_TOKENS,
            messages=[{"role": "user", "content": blocks}],
        )
    except LLMRequestError as exc:
        raise GuidelineExtractionError(str(exc)) from exc
    return _parse_reply(response)


def _palette_category(raw: Any) -> str:
    category = str(raw or "primary").strip().lower()
    category = CATEGORY_ALIASES.get(category, category)
    return category if category in models.PALETTE_CATEGORIES else "primary"


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if value in (None, ""):
        return []
    return [value]


def fonts_markdown(fonts: List[Dict[str, Any]]) -> str:
    return "\n".join(
        f"### {font.get('name', 'Font')}\n\n"
        f"**Weights**: {', '.join(str(w) for w in _as_list(font.get('weights')))}\n\n"
        f"**Usage**: {font.get('usage', '')}\n\n"
        for font in fonts
    )


def brand_voice_markdown(voice: Dict[str, Any]) -> str:
    messaging = "\n".join(f"- {m}" for m in _as_list(voice.get("messaging")))
    values = "\n".join(f"- {v}" for v in _as_list(voice.get("values")))
    return (
        f"## Brand Personality\n\n{', '.join(str(p) for p in _as_list(voice.get('personality')))}\n\n"
        f"## Tone of Voice\n\n{voice.get('tone', '')}\n\n"
        f"## Key Messages\n\n{messaging}\n\n"
        f"## Brand Values\n\n{values}\n\n"
        f"## Communication Guidelines\n\n{voice.get('guidelines', '')}"
    )


def applications_markdown(applications: List[Dict[str, Any]]) -> str:
    return "\n".join(
        f"### {app.get('type', 'Application')}\n\n"
        f"**Description**: {app.get('description', '')}\n\n"
        f"**Guidelines**: {app.get('guidelines', '')}\n\n"
        for app in applications
    )


def _save_color(db: Session, color: Dict[str, Any]) -> bool:
    hex_value = str(color.get("hex") or "#000000").strip()
    if not is_valid_hex(hex_value):
        logger.warning("guidelines_color_skipped: name=%s hex=%r", color.get("name"), hex_value)
        return False
    category = _palette_category(color.get("category"))
    palette = color_repo.ensure_palette(db, category, f"{category.capitalize()} Colors")
    color_repo.add_color(
        db,
        palette,
        {
            "name": str(color.get("name") or "Unnamed Color")[:100],
            "hex": normalize_hex(hex_value),
            "rgb": parse_rgb(color.get("rgb")),
            "cmyk": parse_cmyk(color.get("cmyk")),
            "pantone": str(color["pantone"]) if color.get("pantone") else None,
        },
    )
    return True


def save_brand_guidelines(db: Session, extracted: Dict[str, Any]) -> SaveSummary:
    """Persist extracted guidelines; each failing item is logged and skipped."""
    summary = SaveSummary()

    for color in _as_list(extracted.get("colors")):
        if not isinstance(color, dict):
            continue
        try:
            if _save_color(db, color):
                summary.colors += 1
        except _ITEM_ERRORS:
            db.rollback()
            logger.warning("guidelines_color_failed: name=%s", color.get("name"), exc_info=True)

    fonts = [f for f in _as_list(extracted.get("fonts")) if isinstance(f, dict)]
    if fonts:
        try:
            content_repo.upsert_section(db, section="typography", title="Typography", content=fonts_markdown(fonts), order_index=2)
            summary.fonts = len(fonts)
        except _ITEM_ERRORS:
            db.rollback()
            logger.warning("guidelines_fonts_failed", exc_info=True)

    voice = extracted.get("brandVoice")
    if isinstance(voice, dict) and voice:
        try:
            content_repo.upsert_section(
                db,
                section="brand-voice",
                title="Brand Voice & Messaging",
                content=brand_voice_markdown(voice),
                order_index=3,
            )
            summary.brand_voice = True
        except _ITEM_ERRORS:
            db.rollback()
            logger.warning("guidelines_brand_voice_failed", exc_info=True)

    applications = [a for a in _as_list(extracted.get("applications")) if isinstance(a, dict)]
    if applications:
        try:
            content_repo.upsert_section(
                db,
                section="applications",
                title="Brand Applications",
                content=applications_markdown(applications),
                order_index=4,
            )
            summary.applications = len(applications)
        except _ITEM_ERRORS:
            db.rollback()
            logger.warning("guidelines_applications_failed", exc_info=True)

    logger.info("guidelines_saved: %s", summary.as_dict())
    return summary
