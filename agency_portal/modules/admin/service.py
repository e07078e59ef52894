# agency_portal/modules/admin/service.py
from datetime import date
from typing import List, Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import ROLES, User
from agency_portal.shared.schemas.common import UserSummary, UserUpdate
from agency_portal.shared.services.user_service import UserService
from agency_portal.modules.help_requests.repository import HelpRequestsRepository
from .repository import AdminRepository
from .schemas import AdminDashboard, ManagerCreate

logger = logging.getLogger(__name__)

class AdminService:
    """Operations reserved to administrators"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = AdminRepository(db)

    # ==================== MANAGERS ====================

    async def get_managers(self) -> List[UserSummary]:
        return [UserSummary.model_validate(u) for u in self.repository.get_users_by_role("Manager")]

    async def create_manager(self, manager_data: ManagerCreate, admin: User) -> UserSummary:
        try:
            manager = UserService.create_user(self.db, manager_data, "Manager", admin)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating manager {manager_data.work_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create manager"
            )

        self.db.refresh(manager)
        return UserSummary.model_validate(manager)

    async def update_manager(self, manager_id: int, updates: UserUpdate) -> UserSummary:
        manager = self.repository.get_user_with_role(manager_id, "Manager")
        if not manager:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Manager not found"
            )

        try:
            UserService.update_user(self.db, manager, updates)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating manager {manager_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update manager"
            )

        self.db.refresh(manager)
        return UserSummary.model_validate(manager)

    # ==================== DASHBOARD ====================

    async def get_dashboard(self, target_date: Optional[date] = None) -> AdminDashboard:
        target_date = target_date or date.today()
        counts = self.repository.count_users_by_role()
        check_ins = self.repository.get_check_in_counts(target_date)

        return AdminDashboard(
            users_by_role={role: counts.get(role, 0) for role in ROLES},
            active_users=self.repository.count_users_by_status(True),
            inactive_users=self.repository.count_users_by_status(False),
            open_help_requests=HelpRequestsRepository(self.db).count_open(),
            check_ins_today=check_ins["total"],
            late_check_ins_today=check_ins["late"]
        )
