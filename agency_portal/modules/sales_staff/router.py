# agency_portal/modules/sales_staff/router.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_sales_staff_user, require_roles
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import (
    AttendanceRecordResponse, ReportCreate, ReportResponse, ReportReview,
    StatusUpdate, UserSummary, UserUpdate
)
from .service import SalesStaffService
from .schemas import (
    AgentCreate, AgentGroupResponse, AttendanceTimeframeCreate,
    AttendanceTimeframeResponse, ExcuseRequest, GroupMemberCreate,
    GroupMemberResponse, SalesStaffClient, TeamLeaderResponse
)

router = APIRouter()

# Admin and Manager can read sales staff data for any sales staff in scope
get_staff_viewer = require_roles(["Admin", "Manager", "SalesStaff"])

# ==================== ATTENDANCE WINDOW ====================

@router.get("/attendance-timeframe", response_model=AttendanceTimeframeResponse)
async def get_attendance_timeframe(
    sales_staff_id: Optional[int] = Query(None, description="Required for Admin and Manager"),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.get_attendance_timeframe(current_user, sales_staff_id)

@router.post("/attendance-timeframe", response_model=AttendanceTimeframeResponse)
async def set_attendance_timeframe(
    timeframe_data: AttendanceTimeframeCreate,
    response: Response,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    """
    Set the daily check-in window of the caller's agents

    Answers 201 when the window is created and 200 when it is replaced.
    Check-ins after end_time are recorded as late.
    """
    service = SalesStaffService(db)
    timeframe, created = await service.set_attendance_timeframe(timeframe_data, current_user)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return timeframe

# ==================== AGENTS ====================

@router.get("/agents", response_model=List[UserSummary])
async def get_agents(
    sales_staff_id: Optional[int] = Query(None),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    """Agents and team leaders in scope"""
    service = SalesStaffService(db)
    return await service.get_agents(current_user, sales_staff_id)

@router.post("/agents", response_model=UserSummary, status_code=status.HTTP_201_CREATED)
async def create_agent(
    agent_data: AgentCreate,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    """
    Create an agent or a team leader

    A team leader gets a group named "<full_name>'s Group".
    """
    service = SalesStaffService(db)
    return await service.create_agent(agent_data, current_user)

@router.patch("/agents/{agent_id}", response_model=UserSummary)
async def update_agent(
    agent_id: int,
    updates: UserUpdate,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.update_agent(agent_id, updates, current_user)

# ==================== TEAM LEADERS ====================

@router.get("/team-leaders", response_model=List[TeamLeaderResponse])
async def get_team_leaders(
    sales_staff_id: Optional[int] = Query(None),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    """Team leaders in scope with their group"""
    service = SalesStaffService(db)
    return await service.get_team_leaders(current_user, sales_staff_id)

@router.patch("/team-leaders/{team_leader_id}/status", response_model=UserSummary)
async def update_team_leader_status(
    team_leader_id: int,
    status_update: StatusUpdate,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.update_team_leader_status(team_leader_id, status_update.is_active, current_user)

# ==================== GROUPS ====================

@router.get("/agent-groups", response_model=List[AgentGroupResponse])
async def get_agent_groups(
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.get_agent_groups(current_user)

@router.post(
    "/agent-groups/{group_id}/members",
    response_model=GroupMemberResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_group_member(
    group_id: int,
    member_data: GroupMemberCreate,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.add_group_member(group_id, member_data, current_user)

@router.delete("/agent-groups/{group_id}/members/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_group_member(
    group_id: int,
    agent_id: int,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    await service.remove_group_member(group_id, agent_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ==================== ATTENDANCE ====================

@router.get("/attendance", response_model=List[AttendanceRecordResponse])
async def get_attendance(
    sales_staff_id: Optional[int] = Query(None),
    target_date: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD"),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.get_attendance(current_user, sales_staff_id, target_date)

@router.patch("/attendance/{record_id}/excuse", response_model=AttendanceRecordResponse)
async def excuse_attendance(
    record_id: int,
    excuse: ExcuseRequest,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    """Excuse a late or missed check-in of one of the caller's agents"""
    service = SalesStaffService(db)
    return await service.excuse_attendance(record_id, excuse.reason, current_user)

# ==================== REPORTS ====================

@router.get("/reports", response_model=List[ReportResponse])
async def get_agent_reports(
    sales_staff_id: Optional[int] = Query(None),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    """Reports submitted by the agents in scope"""
    service = SalesStaffService(db)
    return await service.get_agent_reports(current_user, sales_staff_id)

@router.get("/team-leader-reports", response_model=List[ReportResponse])
async def get_team_leader_reports(
    sales_staff_id: Optional[int] = Query(None),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    """Aggregated reports of the team leaders in scope"""
    service = SalesStaffService(db)
    return await service.get_team_leader_reports(current_user, sales_staff_id)

@router.post("/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.create_report(report_data, current_user)

@router.patch("/reports/{report_id}/review", response_model=ReportResponse)
async def review_report(
    report_id: int,
    review: ReportReview,
    current_user: User = Depends(get_sales_staff_user),
    db: Session = Depends(get_db)
):
    service = SalesStaffService(db)
    return await service.review_report(report_id, review, current_user)

# ==================== CLIENTS / CONTACTS ====================

@router.get("/clients", response_model=List[SalesStaffClient])
async def get_clients(
    sales_staff_id: Optional[int] = Query(None),
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    """Clients acquired by the agents in scope, newest first"""
    service = SalesStaffService(db)
    return await service.get_clients(current_user, sales_staff_id)

@router.get("/managers", response_model=List[UserSummary])
async def get_managers(
    current_user: User = Depends(get_staff_viewer),
    db: Session = Depends(get_db)
):
    """Managers the caller can message"""
    service = SalesStaffService(db)
    return await service.get_managers(current_user)
