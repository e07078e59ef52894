# agency_portal/modules/admin/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_admin_user
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import UserSummary, UserUpdate
from agency_portal.modules.help_requests.service import HelpRequestsService
from agency_portal.modules.help_requests.schemas import (
    HelpRequestResponse, HelpRequestStatus, HelpRequestUpdate
)
from .service import AdminService
from .schemas import AdminDashboard, ManagerCreate

router = APIRouter()

# ==================== MANAGERS ====================

@router.get("/managers", response_model=List[UserSummary])
async def get_managers(
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """All managers, active and inactive"""
    service = AdminService(db)
    return await service.get_managers()

@router.post("/managers", response_model=UserSummary, status_code=status.HTTP_201_CREATED)
async def create_manager(
    manager_data: ManagerCreate,
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Create a manager

    **Validations:**
    - Email unique in the system
    - Work ID unique in the system
    """
    service = AdminService(db)
    return await service.create_manager(manager_data, current_user)

@router.patch("/managers/{manager_id}", response_model=UserSummary)
async def update_manager(
    manager_id: int,
    updates: UserUpdate,
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Edit or (de)activate a manager"""
    service = AdminService(db)
    return await service.update_manager(manager_id, updates)

# ==================== HELP REQUESTS ====================

@router.get("/help-requests", response_model=List[HelpRequestResponse])
async def get_help_requests(
    status_filter: Optional[HelpRequestStatus] = Query(None, alias="status", description="Filter by status"),
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Every help request, newest first"""
    service = HelpRequestsService(db)
    return await service.get_all_help_requests(status_filter.value if status_filter else None)

@router.patch("/help-requests/{request_id}", response_model=HelpRequestResponse)
async def update_help_request(
    request_id: int,
    updates: HelpRequestUpdate,
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Change status, write a resolution or assign a help request"""
    service = HelpRequestsService(db)
    return await service.update_help_request(request_id, updates, current_user)

# ==================== DASHBOARD ====================

@router.get("/dashboard", response_model=AdminDashboard)
async def get_admin_dashboard(
    current_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """User counts per role, open help requests and today's check-ins"""
    service = AdminService(db)
    return await service.get_dashboard()
