import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BrandConfig(BaseModel):
    key: str = "general"
    homepage_hero_image_id: Optional[uuid.UUID] = None
    homepage_hero_image_url: Optional[str] = None
    description: Optional[str] = None
    settings: Dict[str, Any] = {}
    updated_by: Optional[uuid.UUID] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class BrandConfigUpdate(BaseModel):
    homepage_hero_image_id: Optional[uuid.UUID] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    settings: Optional[Dict[str, Any]] = None
