"""
Domain-split SQLAlchemy models with an aggregator.

Exposes `Base`, `now_utc`, the ORM classes and the shared enum tuples.
"""

from .base import Base, now_utc  # re-export

from .users import User, ROLE_ADMIN, ROLE_USER, USER_ROLES
from .tokens import SessionToken
from .assets import (
    BrandAsset,
    AssetFile,
    ASSET_CATEGORIES,
    ASSET_SECTIONS,
    ASSET_FILE_TYPES,
    PREVIEW_TYPES,
)
from .brand import (
    ColorPalette,
    PaletteColor,
    ContentSection,
    BrandConfig,
    PALETTE_CATEGORIES,
    CONTENT_SECTIONS,
    EDITABLE_CONTENT_SECTIONS,
    BRAND_CONFIG_KEY,
)
from .templates import BrandTemplate, TEMPLATE_TYPES
from .tools import BrandTool
from .chat import ChatConversation, ChatMessage, DEFAULT_CONVERSATION_TITLE
from .audit import AuditLog

__all__ = [
    # base
    "Base",
    "now_utc",
    # identity
    "User",
    "ROLE_ADMIN",
    "ROLE_USER",
    "USER_ROLES",
    "SessionToken",
    # assets
    "BrandAsset",
    "AssetFile",
    "ASSET_CATEGORIES",
    "ASSET_SECTIONS",
    "ASSET_FILE_TYPES",
    "PREVIEW_TYPES",
    # brand
    "ColorPalette",
    "PaletteColor",
    "ContentSection",
    "BrandConfig",
    "PALETTE_CATEGORIES",
    "CONTENT_SECTIONS",
    "EDITABLE_CONTENT_SECTIONS",
    "BRAND_CONFIG_KEY",
    # templates/tools
    "BrandTemplate",
    "TEMPLATE_TYPES",
    "BrandTool",
    # chat
    "ChatConversation",
    "ChatMessage",
    "DEFAULT_CONVERSATION_TITLE",
    # audit
    "AuditLog",
]
