# agency_portal/modules/agent/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_agent_user
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import (
    AttendanceRecordResponse, ClientResponse, ReportCreate, ReportResponse
)
from .service import AgentService
from .schemas import AgentPerformanceResponse, AttendanceWindowResponse, ClientCreate, ClientUpdate

router = APIRouter()

# ==================== ATTENDANCE ====================

@router.get("/attendance-window", response_model=AttendanceWindowResponse)
async def get_attendance_window(
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    """Check-in window set by the agent's sales staff"""
    service = AgentService(db)
    return await service.get_attendance_window(current_user)

@router.post("/attendance", response_model=AttendanceRecordResponse, status_code=status.HTTP_201_CREATED)
async def check_in(
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    """
    Check in for today

    - One check-in per day
    - Late when the check-in happens after the window's end time
    """
    service = AgentService(db)
    return await service.check_in(current_user)

@router.get("/attendance", response_model=List[AttendanceRecordResponse])
async def get_attendance(
    target_date: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD"),
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    service = AgentService(db)
    return await service.get_attendance(current_user, target_date)

# ==================== CLIENTS ====================

@router.get("/clients", response_model=List[ClientResponse])
async def get_clients(
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    service = AgentService(db)
    return await service.get_clients(current_user)

@router.post("/clients", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    """
    Register a client

    **Validations:**
    - The agent has checked in today
    - follow_up_date is set when requires_follow_up is true
    """
    service = AgentService(db)
    return await service.create_client(client_data, current_user)

@router.patch("/clients/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    updates: ClientUpdate,
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    service = AgentService(db)
    return await service.update_client(client_id, updates, current_user)

# ==================== PERFORMANCE ====================

@router.get("/performance/{period}", response_model=AgentPerformanceResponse)
async def get_performance(
    period: str,
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    """Clients and attendance rate over the last day, week or month"""
    service = AgentService(db)
    return await service.get_performance(current_user, period)

# ==================== REPORTS ====================

@router.get("/reports", response_model=List[ReportResponse])
async def get_reports(
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    service = AgentService(db)
    return await service.get_reports(current_user)

@router.post("/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    report_data: ReportCreate,
    current_user: User = Depends(get_agent_user),
    db: Session = Depends(get_db)
):
    service = AgentService(db)
    return await service.create_report(report_data, current_user)
