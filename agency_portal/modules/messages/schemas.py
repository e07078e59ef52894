# agency_portal/modules/messages/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from agency_portal.shared.schemas.common import MessageType

class MessageCreate(BaseModel):
    receiver_id: int = Field(..., description="Recipient user ID")
    content: str = Field(..., min_length=1, max_length=5000)
    message_type: MessageType = MessageType.DIRECT
    related_report_id: Optional[int] = None

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Message cannot be empty')
        return v.strip()

class MessageOut(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    message_type: str
    content: str
    related_report_id: Optional[int] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UnreadCountResponse(BaseModel):
    unread: int
