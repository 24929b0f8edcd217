# Messages Feature - Schemas

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    """Request schema for sending a support message."""
    text: str = Field(..., min_length=1, max_length=5000)
    receiver_id: Optional[str] = Field(None, description="Defaults to the admin team")


class MessageResponse(BaseModel):
    """Response schema for a single message."""
    id: str
    sender_id: str
    receiver_id: str
    text: str
    timestamp: datetime
    read: bool
    type: Literal["system", "manual"]
    
    # Resolved at read time
    senderName: Optional[str] = None


class MessageListResponse(BaseModel):
    """Response schema for a list of messages."""
    messages: List[MessageResponse]
    total: int
    unread: int = 0


class MarkAllReadResponse(BaseModel):
    """Number of messages flipped to read."""
    updated: int
