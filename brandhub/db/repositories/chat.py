"""Chat conversation repository functions."""
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from brandhub.db import models


def get_conversation(db: Session, conversation_id: uuid.UUID, *, user_id: uuid.UUID) -> Optional[models.ChatConversation]:
    """Return an active conversation only when it belongs to ``user_id``."""
    return (
        db.query(models.ChatConversation)
        .filter(
            models.ChatConversation.id == conversation_id,
            models.ChatConversation.user_id == user_id,
            models.ChatConversation.is_active.is_(True),
        )
        .first()
    )


def list_conversations(db: Session, *, user_id: uuid.UUID, limit: int = 50) -> List[models.ChatConversation]:
    return (
        db.query(models.ChatConversation)
        .filter(
            models.ChatConversation.user_id == user_id,
            models.ChatConversation.is_active.is_(True),
        )
        .order_by(models.ChatConversation.updated_at.desc())
        .limit(limit)
        .all()
    )


def new_conversation(*, user_id: uuid.UUID, title: str) -> models.ChatConversation:
    """Unsaved conversation; it is persisted with its first exchange."""
    return models.ChatConversation(user_id=user_id, title=title or models.DEFAULT_CONVERSATION_TITLE)


def record_exchange(
    db: Session,
    conversation: models.ChatConversation,
    *,
    user_content: str,
    reply_content: str,
    tool_calls: Optional[List[Dict[str, Any]]] = None,
) -> models.ChatMessage:
    """Append a user turn and the assistant reply in a single commit; returns the reply."""
    position = len(conversation.messages)
    question = models.ChatMessage(role="user", content=user_content, tool_calls=[], position=position)
    reply = models.ChatMessage(
        role="assistant",
        content=reply_content,
        tool_calls=list(tool_calls or []),
        position=position + 1,
    )
    conversation.messages.extend([question, reply])
    # Touch the parent so listing by updated_at reflects new activity
    conversation.updated_at = models.now_utc()
    db.add(conversation)
    db.commit()
    db.refresh(reply)
    return reply


def delete_conversation(db: Session, conversation: models.ChatConversation) -> None:
    db.delete(conversation)
    db.commit()
