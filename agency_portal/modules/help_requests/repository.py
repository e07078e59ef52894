# agency_portal/modules/help_requests/repository.py
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import datetime

from agency_portal.shared.database.models import HelpRequest

class HelpRequestsRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_help_request(self, user_id: int, request_type: str, issue: str) -> HelpRequest:
        now = datetime.now()
        help_request = HelpRequest(
            user_id=user_id,
            request_type=request_type,
            issue=issue,
            status='open',
            created_at=now,
            updated_at=now
        )

        self.db.add(help_request)
        self.db.flush()
        return help_request

    def get_help_request(self, request_id: int) -> Optional[HelpRequest]:
        return self.db.query(HelpRequest).filter(HelpRequest.id == request_id).first()

    def get_help_requests_by_user(self, user_id: int) -> List[HelpRequest]:
        return self.db.query(HelpRequest).options(
            joinedload(HelpRequest.user)
        ).filter(
            HelpRequest.user_id == user_id
        ).order_by(HelpRequest.created_at.desc(), HelpRequest.id.desc()).all()

    def get_help_requests(self, status: Optional[str] = None) -> List[HelpRequest]:
        query = self.db.query(HelpRequest).options(joinedload(HelpRequest.user))
        if status:
            query = query.filter(HelpRequest.status == status)
        return query.order_by(HelpRequest.created_at.desc(), HelpRequest.id.desc()).all()

    def count_open(self) -> int:
        return self.db.query(HelpRequest).filter(
            HelpRequest.status.in_(['open', 'in_progress'])
        ).count()
