import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class BrandTool(Base):
    __tablename__ = 'brand_tools'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    # Admin-authored code, inlined verbatim into /tools/{slug}
    html_code = Column(Text, nullable=False, default='')
    css_code = Column(Text, nullable=False, default='')
    js_code = Column(Text, nullable=False, default='')
    preview_url = Column(Text, nullable=True)
    preview_storage_path = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    order_index = Column(Integer, nullable=False, default=0)
    created_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    updated_by = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
