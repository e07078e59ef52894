# agency_portal/modules/manager/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_manager_user
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import (
    ReportCreate, ReportResponse, ReportReview, StatusUpdate, UserSummary, UserUpdate
)
from .service import ManagerService
from .schemas import (
    AgentOverview, AgentProfile, ManagerAttendanceRecord,
    PerformanceMetricResponse, PerformancePeriod, SalesStaffCreate
)

router = APIRouter()

# ==================== SALES STAFF ====================

@router.get("/sales-staff", response_model=List[UserSummary])
async def get_sales_staff(
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """Sales staff created by the manager (every sales staff for admin)"""
    service = ManagerService(db)
    return await service.get_sales_staff(current_user)

@router.post("/sales-staff", response_model=UserSummary, status_code=status.HTTP_201_CREATED)
async def create_sales_staff(
    staff_data: SalesStaffCreate,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """
    Create a sales staff owned by the caller

    **Validations:**
    - Email unique in the system
    - Work ID unique in the system
    """
    service = ManagerService(db)
    return await service.create_sales_staff(staff_data, current_user)

@router.patch("/sales-staff/{staff_id}", response_model=UserSummary)
async def update_sales_staff(
    staff_id: int,
    updates: UserUpdate,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    service = ManagerService(db)
    return await service.update_sales_staff(staff_id, updates, current_user)

@router.get("/sales-staff/{staff_id}/agents", response_model=List[UserSummary])
async def get_sales_staff_agents(
    staff_id: int,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """Agents and team leaders of one sales staff"""
    service = ManagerService(db)
    return await service.get_sales_staff_agents(staff_id, current_user)

# ==================== AGENTS ====================

@router.get("/agents", response_model=List[AgentOverview])
async def get_agents(
    sales_staff_id: Optional[int] = Query(None, description="Only agents of this sales staff"),
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """
    Agents in scope with today's activity

    - attendance_status: Present, Late, Excused or Absent
    - clients_added_today
    """
    service = ManagerService(db)
    return await service.get_agents(current_user, sales_staff_id)

@router.get("/agents/{agent_id}", response_model=AgentProfile)
async def get_agent_profile(
    agent_id: int,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """Agent profile with monthly performance and latest clients"""
    service = ManagerService(db)
    return await service.get_agent_profile(agent_id, current_user)

@router.patch("/agents/{agent_id}/status", response_model=UserSummary)
async def update_agent_status(
    agent_id: int,
    status_update: StatusUpdate,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    service = ManagerService(db)
    return await service.update_agent_status(agent_id, status_update.is_active, current_user)

# ==================== ATTENDANCE ====================

@router.get("/attendance", response_model=List[ManagerAttendanceRecord])
async def get_attendance(
    sales_staff_id: Optional[int] = Query(None),
    target_date: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD"),
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """Check-ins of every agent in scope, newest first"""
    service = ManagerService(db)
    return await service.get_attendance(current_user, sales_staff_id, target_date)

# ==================== REPORTS ====================

@router.get("/reports", response_model=List[ReportResponse])
async def get_my_reports(
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    service = ManagerService(db)
    return await service.get_my_reports(current_user)

@router.post("/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    service = ManagerService(db)
    return await service.create_report(report_data, current_user)

@router.get("/sales-staff-reports", response_model=List[ReportResponse])
async def get_sales_staff_reports(
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    service = ManagerService(db)
    return await service.get_sales_staff_reports(current_user)

@router.get("/agent-reports", response_model=List[ReportResponse])
async def get_agent_reports(
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    service = ManagerService(db)
    return await service.get_agent_reports(current_user)

@router.patch("/reports/{report_id}/review", response_model=ReportResponse)
async def review_report(
    report_id: int,
    review: ReportReview,
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """
    Approve or reject a sales staff report

    The submitter receives the feedback as a report_feedback message.
    """
    service = ManagerService(db)
    return await service.review_report(report_id, review, current_user)

# ==================== PERFORMANCE ====================

@router.get("/performance-metrics", response_model=List[PerformanceMetricResponse])
async def get_performance_metrics(
    period: PerformancePeriod = Query(PerformancePeriod.MONTHLY),
    current_user: User = Depends(get_manager_user),
    db: Session = Depends(get_db)
):
    """Store and return a performance snapshot for every active agent in scope"""
    service = ManagerService(db)
    return await service.get_performance_metrics(current_user, period.value)
