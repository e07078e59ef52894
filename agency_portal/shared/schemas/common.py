# agency_portal/shared/schemas/common.py
from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReportStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MessageType(str, Enum):
    DIRECT = "direct"
    ANNOUNCEMENT = "announcement"
    REPORT_FEEDBACK = "report_feedback"


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    """Public view of a user; never carries the password hash"""
    id: int
    work_id: str
    email: str
    full_name: str
    role: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Fields shared by every user creation form"""
    work_id: str = Field(..., min_length=3, max_length=50, description="Unique work ID")
    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator('work_id', 'full_name')
    @classmethod
    def strip_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Value cannot be blank')
        return v.strip()

    @field_validator('email')
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)


class StatusUpdate(BaseModel):
    is_active: bool


class ReportCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    report_type: ReportType
    content: str = Field(..., min_length=1)


class ReportReview(BaseModel):
    status: ReportStatus
    feedback: Optional[str] = Field(None, max_length=2000)

    @field_validator('status')
    @classmethod
    def not_pending(cls, v: ReportStatus) -> ReportStatus:
        if v == ReportStatus.PENDING:
            raise ValueError('Review status must be approved or rejected')
        return v


class ReportResponse(BaseModel):
    id: int
    submitted_by_id: int
    submitted_by_name: Optional[str] = None
    reviewed_by_id: Optional[int] = None
    title: str
    report_type: str
    status: str
    content: str
    is_aggregated: bool
    parent_report_id: Optional[int] = None
    feedback: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttendanceRecordResponse(BaseModel):
    id: int
    agent_id: int
    agent_name: Optional[str] = None
    check_in_time: datetime
    is_late: bool
    is_excused: bool
    excused_by_id: Optional[int] = None
    excuse_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClientResponse(BaseModel):
    id: int
    agent_id: int
    full_name: str
    email: Optional[str] = None
    phone: str
    insurance_type: str
    policy_details: Optional[str] = None
    interaction_time: datetime
    requires_follow_up: bool
    follow_up_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


def report_to_response(report) -> ReportResponse:
    response = ReportResponse.model_validate(report)
    if report.submitted_by is not None:
        response.submitted_by_name = report.submitted_by.full_name
    return response


def attendance_to_response(record) -> AttendanceRecordResponse:
    response = AttendanceRecordResponse.model_validate(record)
    if record.agent is not None:
        response.agent_name = record.agent.full_name
    return response
