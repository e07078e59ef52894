# agency_portal/modules/messages/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_
from typing import List, Optional
from datetime import datetime

from agency_portal.shared.database.models import Message

class MessagesRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_message(
        self,
        sender_id: int,
        receiver_id: int,
        content: str,
        message_type: str = 'direct',
        related_report_id: Optional[int] = None
    ) -> Message:
        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            message_type=message_type,
            related_report_id=related_report_id,
            is_read=False,
            created_at=datetime.now()
        )
        self.db.add(message)
        self.db.flush()
        return message

    def get_message(self, message_id: int) -> Optional[Message]:
        return self.db.query(Message).filter(Message.id == message_id).first()

    def get_messages_by_user(self, user_id: int) -> List[Message]:
        return self.db.query(Message).filter(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id)
        ).order_by(Message.created_at, Message.id).all()

    def get_conversation(self, user_id: int, contact_id: int) -> List[Message]:
        return self.db.query(Message).filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id == contact_id),
                and_(Message.sender_id == contact_id, Message.receiver_id == user_id)
            )
        ).order_by(Message.created_at, Message.id).all()

    def count_unread(self, user_id: int) -> int:
        return self.db.query(Message).filter(
            Message.receiver_id == user_id,
            Message.is_read == False  # noqa: E712
        ).count()
