# agency_portal/modules/team_leader/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from agency_portal.config.database import get_db
from agency_portal.core.auth.dependencies import get_team_leader_user
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import ReportResponse, UserSummary
from .service import TeamLeaderService
from .schemas import AggregateReportCreate, AggregatedReportResponse, TeamLeaderGroup

router = APIRouter()

@router.get("/groups", response_model=List[TeamLeaderGroup])
async def get_groups(
    current_user: User = Depends(get_team_leader_user),
    db: Session = Depends(get_db)
):
    """Groups led by the caller"""
    service = TeamLeaderService(db)
    return await service.get_groups(current_user)

@router.get("/groups/{group_id}/members", response_model=List[UserSummary])
async def get_group_members(
    group_id: int,
    current_user: User = Depends(get_team_leader_user),
    db: Session = Depends(get_db)
):
    service = TeamLeaderService(db)
    return await service.get_group_members(group_id, current_user)

@router.get("/groups/{group_id}/reports/{report_type}", response_model=List[ReportResponse])
async def get_group_reports(
    group_id: int,
    report_type: str,
    current_user: User = Depends(get_team_leader_user),
    db: Session = Depends(get_db)
):
    """Reports of one type (daily, weekly, monthly) submitted by the group's members"""
    service = TeamLeaderService(db)
    return await service.get_group_reports(group_id, report_type, current_user)

@router.post(
    "/groups/{group_id}/reports/aggregate",
    response_model=AggregatedReportResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_aggregated_report(
    group_id: int,
    report_data: AggregateReportCreate,
    current_user: User = Depends(get_team_leader_user),
    db: Session = Depends(get_db)
):
    """
    Submit an aggregated report for the group

    **Validations:**
    - The caller leads the group
    - Every report in report_ids was submitted by a group member
    """
    service = TeamLeaderService(db)
    return await service.create_aggregated_report(group_id, report_data, current_user)
