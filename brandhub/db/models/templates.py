import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, BigInteger, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, now_utc

TEMPLATE_TYPES = ('figma', 'google-slides', 'keynote', 'pdf', 'powerpoint', 'other')


class BrandTemplate(Base):
    __tablename__ = 'brand_templates'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    template_type = Column(String(20), nullable=False, default='other')
    external_link = Column(Text, nullable=True)
    file_url = Column(Text, nullable=True)
    storage_path = Column(Text, nullable=True)
    file_size = Column(BigInteger, nullable=True)
    preview_url = Column(Text, nullable=True)
    preview_storage_path = Column(Text, nullable=True)
    preview_type = Column(String(10), nullable=False, default='image')
    tags = Column(JSONB, nullable=False, default=list)
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    updated_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
