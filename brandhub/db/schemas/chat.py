import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class ToolCallRecord(BaseModel):
    tool: str
    input: Dict[str, Any] = {}
    result: Dict[str, Any] = {}


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    tool_calls: List[ToolCallRecord] = []
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ChatRequest(BaseModel):
    conversation_id: Optional[uuid.UUID] = None
    message: Optional[str] = None


class ChatResponse(BaseModel):
    conversation_id: uuid.UUID
    message: ChatMessage


class ConversationSummary(BaseModel):
    id: uuid.UUID
    title: str
    message_count: int
    last_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Conversation(BaseModel):
    id: uuid.UUID
    title: str
    messages: List[ChatMessage] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
