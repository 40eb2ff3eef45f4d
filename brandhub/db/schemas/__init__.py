"""
Domain-split Pydantic schemas with an aggregator.

Routers import `from brandhub.db import schemas` and use the names below.
"""

from .users import (
    User,
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    UserUpdate,
    PasswordUpdate,
    GoogleAuthUrl,
    GoogleStatus,
)
from .assets import (
    AssetFile,
    BrandAsset,
    AssetMutationResponse,
    AssetFields,
    ReorderItem,
    ReorderRequest,
    ToolAsset,
    ToolAssetFile,
    AssetsForTools,
)
from .colors import (
    RGB,
    CMYK,
    ColorCreate,
    ColorUpdate,
    Color,
    PaletteUpsert,
    PaletteUpdate,
    ColorPalette,
)
from .content import ContentUpsert, ContentUpdate, ContentSection
from .templates import BrandTemplate, TemplateFields, TemplateDownload
from .tools import BrandToolSummary, BrandTool, ToolFields
from .brand_config import BrandConfig, BrandConfigUpdate
from .chat import (
    ToolCallRecord,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ConversationSummary,
    Conversation,
)
from .audits import AuditLogCreate, AuditLog

__all__ = [
    "User", "RegisterRequest", "LoginRequest", "AuthResponse", "UserUpdate",
    "PasswordUpdate", "GoogleAuthUrl", "GoogleStatus",
    "AssetFile", "BrandAsset", "AssetMutationResponse", "AssetFields",
    "ReorderItem", "ReorderRequest", "ToolAsset", "ToolAssetFile",
    "AssetsForTools",
    "RGB", "CMYK", "ColorCreate", "ColorUpdate", "Color", "PaletteUpsert",
    "PaletteUpdate", "ColorPalette",
    "ContentUpsert", "ContentUpdate", "ContentSection",
    "BrandTemplate", "TemplateFields", "TemplateDownload",
    "BrandToolSummary", "BrandTool", "ToolFields",
    "BrandConfig", "BrandConfigUpdate",
    "ToolCallRecord", "ChatMessage", "ChatRequest", "ChatResponse",
    "ConversationSummary", "Conversation",
    "AuditLogCreate", "AuditLog",
]
