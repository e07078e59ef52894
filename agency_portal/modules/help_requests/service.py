# agency_portal/modules/help_requests/service.py
from typing import List, Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import User
from .repository import HelpRequestsRepository
from .schemas import HelpRequestCreate, HelpRequestResponse, HelpRequestUpdate, help_request_to_response

logger = logging.getLogger(__name__)

class HelpRequestsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = HelpRequestsRepository(db)

    async def create_help_request(self, data: HelpRequestCreate, user: User) -> HelpRequestResponse:
        help_request = self.repository.create_help_request(user.id, data.request_type, data.issue)
        self.db.commit()
        self.db.refresh(help_request)

        logger.info(f"Help request {help_request.id} opened by {user.work_id}")
        return help_request_to_response(help_request)

    async def get_my_help_requests(self, user: User) -> List[HelpRequestResponse]:
        return [help_request_to_response(r) for r in self.repository.get_help_requests_by_user(user.id)]

    async def get_all_help_requests(self, status_filter: Optional[str] = None) -> List[HelpRequestResponse]:
        return [help_request_to_response(r) for r in self.repository.get_help_requests(status_filter)]

    async def update_help_request(self, request_id: int, updates: HelpRequestUpdate, admin: User) -> HelpRequestResponse:
        help_request = self.repository.get_help_request(request_id)
        if not help_request:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Help request not found"
            )

        data = updates.model_dump(exclude_unset=True)

        if data.get("assigned_to_id") is not None:
            assignee = self.db.query(User).filter(User.id == data["assigned_to_id"]).first()
            if not assignee or not assignee.is_active:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Assignee not found"
                )

        # status is NOT NULL; an explicit null leaves it unchanged
        if "status" in data:
            if data["status"] is None:
                del data["status"]
            else:
                data["status"] = data["status"].value

        for field, value in data.items():
            setattr(help_request, field, value)

        self.db.commit()
        self.db.refresh(help_request)

        logger.info(f"Help request {request_id} updated by {admin.work_id}: {data}")
        return help_request_to_response(help_request)
