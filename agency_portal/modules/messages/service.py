# agency_portal/modules/messages/service.py
from typing import List, Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import Report, User
from .repository import MessagesRepository
from .schemas import MessageCreate, MessageOut, UnreadCountResponse

logger = logging.getLogger(__name__)

class MessagesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = MessagesRepository(db)

    async def send_message(self, data: MessageCreate, sender: User) -> MessageOut:
        if data.receiver_id == sender.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot send a message to yourself"
            )

        receiver = self.db.query(User).filter(User.id == data.receiver_id).first()
        if not receiver or not receiver.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Recipient not found"
            )

        if data.related_report_id is not None:
            report = self.db.query(Report).filter(Report.id == data.related_report_id).first()
            if not report:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Report not found"
                )

        message = self.repository.create_message(
            sender_id=sender.id,
            receiver_id=receiver.id,
            content=data.content,
            message_type=data.message_type.value,
            related_report_id=data.related_report_id
        )
        self.db.commit()
        self.db.refresh(message)

        logger.info(f"Message {message.id} ({message.message_type}) from {sender.work_id} to {receiver.work_id}")
        return MessageOut.model_validate(message)

    def notify_report_feedback(self, reviewer: User, report: Report) -> None:
        """Queue a report_feedback message to the submitter; the caller commits"""
        content = f"Your report \"{report.title}\" was {report.status}."
        if report.feedback:
            content += f" Feedback: {report.feedback}"
        self.repository.create_message(
            sender_id=reviewer.id,
            receiver_id=report.submitted_by_id,
            content=content,
            message_type='report_feedback',
            related_report_id=report.id
        )

    async def get_messages(self, user: User, contact_id: Optional[int] = None) -> List[MessageOut]:
        if contact_id is not None:
            messages = self.repository.get_conversation(user.id, contact_id)
        else:
            messages = self.repository.get_messages_by_user(user.id)
        return [MessageOut.model_validate(m) for m in messages]

    async def mark_as_read(self, message_id: int, user: User) -> MessageOut:
        message = self.repository.get_message(message_id)
        # Only the receiver can mark a message as read
        if not message or message.receiver_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Message not found"
            )

        message.is_read = True
        self.db.commit()
        self.db.refresh(message)
        return MessageOut.model_validate(message)

    async def get_unread_count(self, user: User) -> UnreadCountResponse:
        return UnreadCountResponse(unread=self.repository.count_unread(user.id))
