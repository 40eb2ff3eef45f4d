import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TemplateType = Literal["figma", "google-slides", "keynote", "pdf", "powerpoint", "other"]


class BrandTemplate(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    template_type: TemplateType
    external_link: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    preview_url: Optional[str] = None
    preview_type: str = "image"
    tags: List[str] = []
    order_index: int = 0
    is_active: bool = True
    created_by: Optional[uuid.UUID] = None
    updated_by: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TemplateFields(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    template_type: Optional[TemplateType] = None
    external_link: Optional[str] = None
    preview_type: Optional[Literal["image", "video", "gif"]] = None
    tags: Optional[List[str]] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


class TemplateDownload(BaseModel):
    url: str
    expires_in: Optional[int] = None
