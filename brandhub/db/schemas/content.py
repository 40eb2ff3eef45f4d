import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ContentUpsert(BaseModel):
    section: str
    title: str
    content: str = ""
    order_index: Optional[int] = None


class ContentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


class ContentSection(BaseModel):
    id: uuid.UUID
    section: str
    title: str
    content: str
    order_index: int = 0
    is_active: bool = True
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
