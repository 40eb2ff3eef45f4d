import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc

PALETTE_CATEGORIES = ('primary', 'secondary', 'tertiary')
# Editable from the admin UI; 'typography' and 'applications' are written by guideline import.
EDITABLE_CONTENT_SECTIONS = ('brand-voice', 'messaging', 'strategy-positioning')
CONTENT_SECTIONS = EDITABLE_CONTENT_SECTIONS + ('typography', 'applications')
BRAND_CONFIG_KEY = 'general'


class ColorPalette(Base):
    __tablename__ = 'color_palettes'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    category = Column(String(20), nullable=False, unique=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    colors = relationship(
        "PaletteColor",
        back_populates="palette",
        order_by="PaletteColor.order_index",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class PaletteColor(Base):
    __tablename__ = 'palette_colors'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    palette_id = Column(UUID(as_uuid=True), ForeignKey('color_palettes.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    hex = Column(String(7), nullable=False)
    # {"r": 0-255, "g": ..., "b": ...}
    rgb = Column(JSONB, nullable=True)
    # {"c": 0-100, "m": ..., "y": ..., "k": ...}
    cmyk = Column(JSONB, nullable=True)
    pantone = Column(String(100), nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    palette = relationship("ColorPalette", back_populates="colors")


class ContentSection(Base):
    __tablename__ = 'content_sections'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    section = Column(String(40), nullable=False, unique=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False, default='')
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class BrandConfig(Base):
    __tablename__ = 'brand_config'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    key = Column(String(40), nullable=False, unique=True, default=BRAND_CONFIG_KEY)
    homepage_hero_image_id = Column(UUID(as_uuid=True), ForeignKey('brand_assets.id', ondelete='SET NULL'), nullable=True)
    homepage_hero_image_url = Column(Text, nullable=True)
    description = Column(String(2000), nullable=True)
    settings = Column(JSONB, nullable=False, default=dict)
    updated_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
