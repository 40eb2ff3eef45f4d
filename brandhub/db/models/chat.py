import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc

DEFAULT_CONVERSATION_TITLE = 'New Conversation'


class ChatConversation(Base):
    __tablename__ = 'chat_conversations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    title = Column(String(200), nullable=False, default=DEFAULT_CONVERSATION_TITLE)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    messages = relationship(
        "ChatMessage",
        back_populates="conversation",
        order_by="ChatMessage.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index('idx_chat_conversations_user_updated', 'user_id', 'updated_at'),
    )


class ChatMessage(Base):
    __tablename__ = 'chat_messages'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id = Column(UUID(as_uuid=True), ForeignKey('chat_conversations.id', ondelete='CASCADE'), nullable=False, index=True)
    # 'user'|'assistant'
    role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    # [{"tool": name, "input": {...}, "result": {...}}]
    tool_calls = Column(JSONB, nullable=False, default=list)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    conversation = relationship("ChatConversation", back_populates="messages")
