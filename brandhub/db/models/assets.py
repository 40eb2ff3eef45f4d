import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, BigInteger, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc

ASSET_CATEGORIES = (
    'logo-primary',
    'logo-secondary',
    'logomark',
    'typography-hierarchy',
    'font-primary',
    'font-secondary',
    'font-tertiary',
    'imagery',
    'icons',
    'patterns',
    'other',
)
ASSET_SECTIONS = ('logos', 'typography', 'imagery', 'other')
ASSET_FILE_TYPES = (
    'PNG', 'SVG', 'JPG', 'EPS', 'PDF', 'OTF', 'TTF', 'WOFF', 'WOFF2',
    'GIF', 'WEBP', 'MP4', 'WEBM', 'AI', 'PPTX', 'KEY',
)
PREVIEW_TYPES = ('image', 'video', 'gif')


class BrandAsset(Base):
    __tablename__ = 'brand_assets'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(String(2000), nullable=True)
    category = Column(String(40), nullable=False)
    section = Column(String(20), nullable=False, default='other')
    preview_url = Column(Text, nullable=True)
    preview_storage_path = Column(Text, nullable=True)
    preview_type = Column(String(10), nullable=False, default='image')
    page_count = Column(Integer, nullable=False, default=1)
    tags = Column(JSONB, nullable=False, default=list)
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    updated_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    files = relationship(
        "AssetFile",
        back_populates="asset",
        order_by="AssetFile.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index('idx_brand_assets_section_category_order', 'section', 'category', 'order_index'),
    )


class AssetFile(Base):
    """A single format variant (PNG, SVG, ...) of a brand asset."""
    __tablename__ = 'asset_files'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    asset_id = Column(UUID(as_uuid=True), ForeignKey('brand_assets.id', ondelete='CASCADE'), nullable=False, index=True)
    file_type = Column(String(10), nullable=False)
    file_url = Column(Text, nullable=False)
    storage_path = Column(Text, nullable=True)
    file_size = Column(BigInteger, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    asset = relationship("BrandAsset", back_populates="files")
