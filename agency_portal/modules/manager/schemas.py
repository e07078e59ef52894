# agency_portal/modules/manager/schemas.py
from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
from enum import Enum

from agency_portal.shared.schemas.common import (
    AttendanceRecordResponse, ClientResponse, UserCreate, UserSummary
)

class PerformancePeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

class SalesStaffCreate(UserCreate):
    """Create a sales staff account"""
    pass

class AgentOverview(UserSummary):
    sales_staff_id: Optional[int] = None
    sales_staff_name: Optional[str] = None
    attendance_status: str
    clients_added_today: int

class PerformanceSummary(BaseModel):
    period: str
    start_date: datetime
    end_date: datetime
    clients_added: int
    attendance_rate: float
    reports_submitted: int
    report_approval_rate: float
    performance_score: int

class AgentProfile(BaseModel):
    agent: UserSummary
    sales_staff: Optional[UserSummary] = None
    performance: PerformanceSummary
    recent_clients: List[ClientResponse]

class ManagerAttendanceRecord(AttendanceRecordResponse):
    sales_staff_id: Optional[int] = None
    sales_staff_name: Optional[str] = None

class PerformanceMetricResponse(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    work_id: Optional[str] = None
    period: str
    clients_acquired: int
    attendance_rate: int
    performance_score: int
    performance_trend: int
    reports_submitted: int
    report_approval_rate: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
