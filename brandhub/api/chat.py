"""
AI chat assistant endpoints.

Conversations are private to their owner; every request sends the full
stored history to the model.
"""
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from brandhub.api.deps import get_current_user_context
from brandhub.db import models, schemas
from brandhub.db.database import get_db
from brandhub.db.repositories import chat as chat_repo
from brandhub.services.chat_service import process_chat
from brandhub.services.llm import LLMClient, LLMNotConfiguredError, LLMRequestError, get_llm_client
from brandhub.services.storage import StorageService, get_storage_service
from brandhub.utils.feature_flags import chat_feature_enabled

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

TITLE_MAX_LENGTH = 60
LAST_MESSAGE_PREVIEW = 100


def conversation_title(message: str) -> str:
    if len(message) > TITLE_MAX_LENGTH:
        return message[: TITLE_MAX_LENGTH - 3] + "..."
    return message


def _get_conversation_or_404(db: Session, conversation_id: uuid.UUID, user: models.User) -> models.ChatConversation:
    conversation = chat_repo.get_conversation(db, conversation_id, user_id=user.id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.post("/", response_model=schemas.ChatResponse)
def send_message(
    payload: schemas.ChatRequest,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    client: LLMClient = Depends(get_llm_client),
    storage: StorageService = Depends(get_storage_service),
):
    if not chat_feature_enabled():
        raise HTTPException(status_code=503, detail="AI chat is disabled")
    if not client.is_configured():
        raise HTTPException(status_code=503, detail="AI chat is not configured")

    user, _ = user_context
    message = (payload.message or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    if payload.conversation_id:
        conversation = _get_conversation_or_404(db, payload.conversation_id, user)
    else:
        conversation = chat_repo.new_conversation(user_id=user.id, title=conversation_title(message))

    # Nothing is stored until the model has answered
    history = [{"role": m.role, "content": m.content} for m in conversation.messages]
    history.append({"role": "user", "content": message})

    try:
        result = process_chat(db, history, user.google_tokens, client=client, storage=storage)
    except LLMNotConfiguredError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except LLMRequestError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    reply = chat_repo.record_exchange(
        db,
        conversation,
        user_content=message,
        reply_content=result.content,
        tool_calls=result.tool_calls,
    )
    logger.info(
        "chat_reply: conversation=%s tool_calls=%d",
        conversation.id,
        len(result.tool_calls),
    )
    return schemas.ChatResponse(
        conversation_id=conversation.id,
        message=schemas.ChatMessage.model_validate(reply),
    )


@router.get("/conversations", response_model=List[schemas.ConversationSummary])
def list_conversations(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    summaries = []
    for conversation in chat_repo.list_conversations(db, user_id=user.id):
        last = conversation.messages[-1].content[:LAST_MESSAGE_PREVIEW] if conversation.messages else None
        summaries.append(
            schemas.ConversationSummary(
                id=conversation.id,
                title=conversation.title,
                message_count=len(conversation.messages),
                last_message=last,
                created_at=conversation.created_at,
                updated_at=conversation.updated_at,
            )
        )
    return summaries


@router.get("/conversations/{conversation_id}", response_model=schemas.Conversation)
def get_conversation(
    conversation_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    return _get_conversation_or_404(db, conversation_id, user)


@router.delete("/conversations/{conversation_id}")
def delete_conversation(
    conversation_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    conversation = _get_conversation_or_404(db, conversation_id, user)
    chat_repo.delete_conversation(db, conversation)
    return {"message": "Conversation deleted"}
