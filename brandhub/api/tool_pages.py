"""
Standalone HTML pages for brand tools, served at ``/tools/{slug}``.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from jinja2 import TemplateError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brandhub.db.database import get_db
from brandhub.db.repositories import tools as tool_repo
from brandhub.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tool-pages"])

HOME_URL = "/"


@router.get("/{slug}", response_class=HTMLResponse)
def tool_page(slug: str, db: Session = Depends(get_db)):
    """Render an active tool with its CSS, HTML and script inlined.

    Tool code is authored by admins and inserted as-is; only the title is
    escaped. The script runs inside a strict-mode IIFE.
    """
    try:
        tool = tool_repo.get_by_slug(db, slug)
        if not tool:
            return HTMLResponse(render("tool_not_found.html", home_url=HOME_URL), status_code=404)
        html = render(
            "tool_page.html",
            title=tool.title,
            html_code=tool.html_code or "",
            css_code=tool.css_code or "",
            js_code=tool.js_code or "",
            home_url=HOME_URL,
        )
    except (SQLAlchemyError, TemplateError):
        logger.exception("tool_page_failed: slug=%s", slug)
        return HTMLResponse(render("tool_error.html", home_url=HOME_URL), status_code=500)
    return HTMLResponse(html)
