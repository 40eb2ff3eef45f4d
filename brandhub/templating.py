"""Jinja2 environment for server-rendered HTML (tool pages and PDF documents)."""
import logging
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


@lru_cache(maxsize=1)
def get_template_env() -> Environment:
    """Autoescaping environment; templates opt out per value with ``|safe``."""
    if not TEMPLATE_DIR.exists():
        logger.warning("Template directory not found: %s", TEMPLATE_DIR)
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(template_name: str, **context) -> str:
    return get_template_env().get_template(template_name).render(**context)
