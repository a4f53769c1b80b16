from datetime import datetime
from typing import Optional

from pydantic import BaseModel

class MessageInput(BaseModel):
    """Request body for POST /api/messages."""
    text: Optional[str] = None
    subject: Optional[str] = None

class MessageDTO(BaseModel):
    id: int
    text: str
    isUser: bool
    subject: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, m) -> "MessageDTO":
        return cls(id=m.id, text=m.text, isUser=m.is_user, subject=m.subject, createdAt=m.created_at)

class MessageExchange(BaseModel):
    """Response of POST /api/messages: both records of one turn."""
    userMessage: MessageDTO
    aiMessage: MessageDTO
    category: Optional[str] = None

class DeleteResult(BaseModel):
    message: str
    deletedCount: int
