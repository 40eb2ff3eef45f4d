import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from brandhub.utils.colors import HEX_PATTERN

PaletteCategory = Literal["primary", "secondary", "tertiary"]


class RGB(BaseModel):
    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)


class CMYK(BaseModel):
    c: int = Field(ge=0, le=100)
    m: int = Field(ge=0, le=100)
    y: int = Field(ge=0, le=100)
    k: int = Field(ge=0, le=100)


def _check_hex(v: Optional[str]) -> Optional[str]:
    if v is not None and not HEX_PATTERN.match(v):
        raise ValueError("Invalid hex color")
    return v


class ColorBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    hex: str
    rgb: Optional[RGB] = None
    cmyk: Optional[CMYK] = None
    pantone: Optional[str] = None

    @field_validator("hex")
    @classmethod
    def _validate_hex(cls, v):
        return _check_hex(v)


class ColorCreate(ColorBase):
    pass


class ColorUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    hex: Optional[str] = None
    rgb: Optional[RGB] = None
    cmyk: Optional[CMYK] = None
    pantone: Optional[str] = None

    @field_validator("hex")
    @classmethod
    def _validate_hex(cls, v):
        return _check_hex(v)


class Color(ColorBase):
    id: uuid.UUID
    order_index: int = 0
    model_config = ConfigDict(from_attributes=True)


class PaletteUpsert(BaseModel):
    category: str
    title: str
    description: Optional[str] = None
    colors: Optional[List[ColorCreate]] = None
    order_index: Optional[int] = None


class PaletteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


class ColorPalette(BaseModel):
    id: uuid.UUID
    category: PaletteCategory
    title: str
    description: Optional[str] = None
    colors: List[Color] = []
    order_index: int = 0
    is_active: bool = True
    model_config = ConfigDict(from_attributes=True)

