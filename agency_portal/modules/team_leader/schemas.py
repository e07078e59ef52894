# agency_portal/modules/team_leader/schemas.py
from pydantic import BaseModel
from typing import Optional, List

from agency_portal.shared.schemas.common import ReportCreate, ReportResponse

class TeamLeaderGroup(BaseModel):
    id: int
    name: str
    sales_staff_id: int
    member_count: int

class AggregateReportCreate(ReportCreate):
    """Report summarizing member reports; listed reports become its children"""
    report_ids: Optional[List[int]] = None

class AggregatedReportResponse(ReportResponse):
    child_report_ids: List[int] = []
