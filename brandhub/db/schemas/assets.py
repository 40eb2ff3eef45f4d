import uuid
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .colors import Color

AssetCategory = Literal[
    "logo-primary",
    "logo-secondary",
    "logomark",
    "typography-hierarchy",
    "font-primary",
    "font-secondary",
    "font-tertiary",
    "imagery",
    "icons",
    "patterns",
    "other",
]
AssetSection = Literal["logos", "typography", "imagery", "other"]
PreviewType = Literal["image", "video", "gif"]


class AssetFile(BaseModel):
    id: uuid.UUID
    file_type: str
    file_url: str
    storage_path: Optional[str] = None
    file_size: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class BrandAsset(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    category: AssetCategory
    section: AssetSection
    files: List[AssetFile] = []
    preview_url: Optional[str] = None
    preview_type: PreviewType = "image"
    page_count: int = 1
    tags: List[str] = []
    order_index: int = 0
    is_active: bool = True
    created_by: Optional[uuid.UUID] = None
    updated_by: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class AssetMutationResponse(BaseModel):
    message: str
    asset: BrandAsset


class ReorderItem(BaseModel):
    id: uuid.UUID
    order_index: int


class ReorderRequest(BaseModel):
    items: List[ReorderItem]


class ToolAssetFile(BaseModel):
    type: str
    url: str


class ToolAsset(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    preview_url: Optional[str] = None
    files: List[ToolAssetFile] = []


class AssetsForTools(BaseModel):
    assets: Dict[str, Dict[str, List[ToolAsset]]]
    colors: List[Color]
    imagery: List[ToolAsset]
    icons: List[ToolAsset]
    patterns: List[ToolAsset]
    # {category: [asset, ...]} for the logos section
    logos: Dict[str, List[ToolAsset]]


class AssetFields(BaseModel):
    """Validated metadata for multipart create/update forms."""
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[AssetCategory] = None
    section: Optional[AssetSection] = None
    preview_type: Optional[PreviewType] = None
    page_count: Optional[int] = Field(default=None, ge=1)
    tags: Optional[List[str]] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None
