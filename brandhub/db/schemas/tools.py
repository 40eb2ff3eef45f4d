import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BrandToolSummary(BaseModel):
    """Listing shape; code fields are never included."""
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    slug: str
    preview_url: Optional[str] = None
    is_active: bool = True
    order_index: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class BrandTool(BrandToolSummary):
    html_code: str = ""
    css_code: str = ""
    js_code: str = ""


class ToolFields(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    slug: Optional[str] = Field(default=None, pattern=r"^[a-z0-9-]+$")
    html_code: Optional[str] = None
    css_code: Optional[str] = None
    js_code: Optional[str] = None
    is_active: Optional[bool] = None
    order_index: Optional[int] = None
