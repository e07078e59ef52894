# agency_portal/modules/messages/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_current_user
from agency_portal.shared.database.models import User
from .service import MessagesService
from .schemas import MessageCreate, MessageOut, UnreadCountResponse

router = APIRouter()

@router.get("", response_model=List[MessageOut])
async def get_messages(
    contact_id: Optional[int] = Query(None, description="Only the conversation with this user"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Messages sent or received by the current user, oldest first"""
    service = MessagesService(db)
    return await service.get_messages(current_user, contact_id)

@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Send a message to another active user"""
    service = MessagesService(db)
    return await service.send_message(message_data, current_user)

@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = MessagesService(db)
    return await service.get_unread_count(current_user)

@router.patch("/{message_id}/read", response_model=MessageOut)
async def mark_message_as_read(
    message_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark a received message as read"""
    service = MessagesService(db)
    return await service.mark_as_read(message_id, current_user)
