import uuid
from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc

ROLE_ADMIN = 'admin'
ROLE_USER = 'user'
USER_ROLES = (ROLE_ADMIN, ROLE_USER)


class User(Base):
    __tablename__ = 'users'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    # 'admin'|'user'
    role = Column(String(20), nullable=False, default=ROLE_USER)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    # Google OAuth grant used for Slides export
    google_access_token = Column(Text, nullable=True)
    google_refresh_token = Column(Text, nullable=True)
    google_token_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def google_tokens(self):
        if not self.google_access_token and not self.google_refresh_token:
            return None
        return {
            "access_token": self.google_access_token,
            "refresh_token": self.google_refresh_token,
            "expiry": self.google_token_expiry,
        }
