"""Branded PDF documents (flyer, one-pager, brochure) rendered with Playwright."""
from __future__ import annotations

import base64
import logging
import math
import os
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from sqlalchemy.orm import Session

from brandhub.services.brand_context import get_brand_colors, get_primary_logo_url
from brandhub.services.storage import StorageService
from brandhub.templating import render

logger = logging.getLogger(__name__)

DOCUMENT_TEMPLATES = {
    "flyer": "pdf/flyer.html",
    "one-pager": "pdf/one_pager.html",
    "brochure": "pdf/brochure.html",
}
DEFAULT_DOCUMENT_TYPE = "one-pager"
DOCUMENT_FOLDER = "documents"


class PdfRenderError(RuntimeError):
    """Raised when the headless browser fails to produce a PDF."""


@dataclass
class PdfConfig:
    timeout_ms: int = 15000
    launch_args: List[str] = field(default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"])

    @classmethod
    def from_env(cls) -> "PdfConfig":
        raw = os.getenv("PDF_RENDER_TIMEOUT_MS")
        try:
            timeout_ms = int(raw) if raw else 15000
        except ValueError:
            logger.warning("Ignoring non-integer PDF_RENDER_TIMEOUT_MS=%r", raw)
            timeout_ms = 15000
        return cls(timeout_ms=timeout_ms)


def _sections(content: Dict[str, Any]) -> List[Dict[str, str]]:
    return [
        {"heading": str(s.get("heading") or ""), "body": str(s.get("body") or "")}
        for s in content.get("sections") or []
        if isinstance(s, dict)
    ]


def render_document_html(
    document_type: str,
    content: Dict[str, Any],
    colors,
    logo_url: Optional[str] = None,
) -> str:
    """HTML for one document; unknown types fall back to the one-pager layout."""
    template = DOCUMENT_TEMPLATES.get(document_type, DOCUMENT_TEMPLATES[DEFAULT_DOCUMENT_TYPE])
    sections = _sections(content)
    split = math.ceil(len(sections) / 2)
    return render(
        template,
        content=content,
        sections=sections,
        left_sections=sections[:split],
        right_sections=sections[split:],
        colors=colors,
        logo_url=logo_url,
    )


def render_pdf(html: str, config: Optional[PdfConfig] = None) -> bytes:
    config = config or PdfConfig.from_env()
    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=True, args=config.launch_args)
            try:
                page = browser.new_page()
                page.set_content(html, wait_until="networkidle", timeout=config.timeout_ms)
                return page.pdf(
                    format="Letter",
                    print_background=True,
                    margin={"top": "0", "right": "0", "bottom": "0", "left": "0"},
                )
            finally:
                browser.close()
    except PlaywrightError as exc:
        logger.error("pdf_render_failed: %s", exc, exc_info=True)
        raise PdfRenderError(str(exc)) from exc


def generate_pdf(
    db: Session,
    document_type: str,
    content: Dict[str, Any],
    storage: StorageService,
    *,
    renderer: Optional[Callable[[str], bytes]] = None,
) -> Dict[str, Any]:
    """Render a branded PDF and return a download URL or base64 payload."""
    html = render_document_html(document_type, content, get_brand_colors(db), get_primary_logo_url(db))
    pdf_bytes = (renderer or render_pdf)(html)
    title = content.get("title")

    if storage.is_configured():
        stored = storage.upload(
            pdf_bytes,
            f"{document_type}-{int(time.time() * 1000)}.pdf",
            "application/pdf",
            folder=DOCUMENT_FOLDER,
        )
        logger.info("pdf_uploaded: type=%s path=%s size=%d", document_type, stored.path, stored.size)
        return {
            "success": True,
            "url": stored.public_url,
            "file_name": stored.path,
            "type": document_type,
            "title": title,
        }

    return {
        "success": True,
        "base64": base64.b64encode(pdf_bytes).decode("ascii"),
        "type": document_type,
        "title": title,
    }
