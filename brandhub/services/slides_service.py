"""Google Slides generation for the chat assistant.

Decks are created in the requesting user's Drive with their stored OAuth
tokens; all slide content is written with a single ``batchUpdate``.
"""
from __future__ import annotations

import logging
import re
from datetime import timezone
from typing import Any, Dict, List, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from sqlalchemy.orm import Session

from brandhub.services.brand_context import BrandColors, get_brand_colors
from brandhub.services.google_oauth import TOKEN_URI, GoogleOAuthConfig

logger = logging.getLogger(__name__)

_HEX = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)
HERO_SLIDE_TYPES = ("title", "closing")
FONT_FAMILY = "Inter"
PRESENTATION_URL = "https://docs.google.com/presentation/d/{presentation_id}/edit"


class GoogleNotConnectedError(RuntimeError):
    """Raised when the user has no stored Google refresh token."""


def hex_to_rgb(value: Optional[str]) -> Dict[str, float]:
    """Slides API color (0..1 floats); black for anything that is not #RRGGBB."""
    match = _HEX.match(value or "")
    if not match:
        return {"red": 0, "green": 0, "blue": 0}
    red, green, blue = (int(part, 16) / 255 for part in match.groups())
    return {"red": red, "green": green, "blue": blue}


def build_credentials(tokens: Optional[Dict[str, Any]], config: Optional[GoogleOAuthConfig] = None) -> Credentials:
    if not tokens or not tokens.get("refresh_token"):
        raise GoogleNotConnectedError("Google account not connected")
    config = config or GoogleOAuthConfig.from_env()
    expiry = tokens.get("expiry")
    if expiry is not None and expiry.tzinfo is not None:
        # google-auth compares against naive UTC
        expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
    credentials = Credentials(
        token=tokens.get("access_token"),
        refresh_token=tokens.get("refresh_token"),
        token_uri=TOKEN_URI,
        client_id=config.client_id,
        client_secret=config.client_secret,
        scopes=config.scopes,
        expiry=expiry,
    )
    if not credentials.valid:
        credentials.refresh(Request())
    return credentials


def _box(object_id: str, page_id: str, width: int, height: int, x: int, y: int) -> Dict[str, Any]:
    return {
        "createShape": {
            "objectId": object_id,
            "shapeType": "TEXT_BOX",
            "elementProperties": {
                "pageObjectId": page_id,
                "size": {
                    "width": {"magnitude": width, "unit": "EMU"},
                    "height": {"magnitude": height, "unit": "EMU"},
                },
                "transform": {"scaleX": 1, "scaleY": 1, "translateX": x, "translateY": y, "unit": "EMU"},
            },
        }
    }


def _text_style(object_id: str, size: int, color: Dict[str, float], *, bold: bool = False) -> Dict[str, Any]:
    style: Dict[str, Any] = {
        "fontSize": {"magnitude": size, "unit": "PT"},
        "fontFamily": FONT_FAMILY,
        "foregroundColor": {"opaqueColor": {"rgbColor": color}},
    }
    fields = "fontSize,fontFamily,foregroundColor"
    if bold:
        style["bold"] = True
        fields = "fontSize,fontFamily,bold,foregroundColor"
    return {"updateTextStyle": {"objectId": object_id, "style": style, "textRange": {"type": "ALL"}, "fields": fields}}


def build_slide_requests(slides: List[Dict[str, Any]], colors: BrandColors) -> List[Dict[str, Any]]:
    """batchUpdate requests laying out every slide on a BLANK layout."""
    requests_: List[Dict[str, Any]] = []
    for index, slide in enumerate(slides):
        slide_id = f"slide_{index}"
        slide_type = slide.get("slide_type", "content")
        is_hero = slide_type in HERO_SLIDE_TYPES
        bullets = [str(b) for b in slide.get("bullets") or []]

        requests_.append({
            "createSlide": {
                "objectId": slide_id,
                "insertionIndex": index,
                "slideLayoutReference": {"predefinedLayout": "BLANK"},
            }
        })
        requests_.append({
            "updatePageProperties": {
                "objectId": slide_id,
                "pageProperties": {
                    "pageBackgroundFill": {
                        "solidFill": {"color": {"rgbColor": hex_to_rgb(colors.primary if is_hero else colors.background)}}
                    }
                },
                "fields": "pageBackgroundFill.solidFill.color",
            }
        })

        title_id = f"title_{index}"
        requests_.append(_box(title_id, slide_id, 8000000, 2000000 if is_hero else 1000000, 500000, 2000000 if is_hero else 400000))
        requests_.append({"insertText": {"objectId": title_id, "text": slide.get("title") or ""}})
        requests_.append(
            _text_style(title_id, 36 if is_hero else 28, hex_to_rgb(colors.background if is_hero else colors.primary), bold=True)
        )

        if bullets and slide_type == "content":
            body_id = f"body_{index}"
            requests_.append(_box(body_id, slide_id, 8000000, 3500000, 500000, 1600000))
            requests_.append({"insertText": {"objectId": body_id, "text": "\n".join(f"• {b}" for b in bullets)}})
            requests_.append(_text_style(body_id, 16, hex_to_rgb(colors.text)))
            requests_.append({
                "updateParagraphStyle": {
                    "objectId": body_id,
                    "style": {"lineSpacing": 180, "spaceAbove": {"magnitude": 6, "unit": "PT"}},
                    "textRange": {"type": "ALL"},
                    "fields": "lineSpacing,spaceAbove",
                }
            })

        if bullets and is_hero:
            sub_id = f"subtitle_{index}"
            requests_.append(_box(sub_id, slide_id, 7000000, 1500000, 500000, 3800000))
            requests_.append({"insertText": {"objectId": sub_id, "text": "\n".join(bullets)}})
            requests_.append(_text_style(sub_id, 18, hex_to_rgb(colors.accent)))
    return requests_


def create_presentation(
    db: Session,
    tokens: Optional[Dict[str, Any]],
    content: Dict[str, Any],
    *,
    service: Any = None,
) -> Dict[str, Any]:
    """Create a branded deck from ``{"title", "slides": [...]}``.

    Speaker notes in the input are accepted but not written.
    """
    if service is None:
        service = build("slides", "v1", credentials=build_credentials(tokens), cache_discovery=False)
    slides = list(content.get("slides") or [])
    title = content.get("title") or "Untitled presentation"

    presentation = service.presentations().create(body={"title": title}).execute()
    presentation_id = presentation["presentationId"]
    default_slide_id = presentation["slides"][0]["objectId"] if presentation.get("slides") else None

    requests_ = build_slide_requests(slides, get_brand_colors(db))
    if default_slide_id:
        requests_.append({"deleteObject": {"objectId": default_slide_id}})
    if requests_:
        service.presentations().batchUpdate(presentationId=presentation_id, body={"requests": requests_}).execute()

    logger.info("presentation_created: id=%s slides=%d", presentation_id, len(slides))
    return {
        "success": True,
        "presentation_id": presentation_id,
        "url": PRESENTATION_URL.format(presentation_id=presentation_id),
        "title": title,
        "slide_count": len(slides),
    }
