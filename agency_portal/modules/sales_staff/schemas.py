# agency_portal/modules/sales_staff/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
import re

from agency_portal.shared.schemas.common import UserCreate, UserSummary

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

class AgentType(str, Enum):
    AGENT = "Agent"
    TEAM_LEADER = "TeamLeader"

# ==================== ATTENDANCE WINDOW ====================

class AttendanceTimeframeCreate(BaseModel):
    """Daily check-in window, 24h HH:MM"""
    start_time: str = Field(..., description="HH:MM", examples=["08:00"])
    end_time: str = Field(..., description="HH:MM", examples=["09:30"])

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        v = v.strip()
        if not HHMM_PATTERN.match(v):
            raise ValueError('Time must use the HH:MM format')
        return v

    @model_validator(mode='after')
    def validate_order(self):
        # Zero-padded HH:MM strings compare like times
        if self.start_time >= self.end_time:
            raise ValueError('start_time must be earlier than end_time')
        return self

class AttendanceTimeframeResponse(BaseModel):
    id: int
    sales_staff_id: int
    start_time: str
    end_time: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# ==================== AGENTS ====================

class AgentCreate(UserCreate):
    """Create an agent or a team leader"""
    type: AgentType = AgentType.AGENT

class GroupSummary(BaseModel):
    id: int
    name: str
    member_count: int = 0

class TeamLeaderResponse(UserSummary):
    group: Optional[GroupSummary] = None

# ==================== GROUPS ====================

class GroupMemberCreate(BaseModel):
    agent_id: Optional[int] = None

class GroupMemberResponse(BaseModel):
    id: int
    group_id: int
    agent_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class AgentGroupResponse(BaseModel):
    id: int
    name: str
    sales_staff_id: int
    team_leader: Optional[UserSummary] = None
    members: List[UserSummary] = []

# ==================== ATTENDANCE ====================

class ExcuseRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)

# ==================== CLIENTS ====================

class SalesStaffClient(BaseModel):
    id: int
    agent_id: int
    agent_name: Optional[str] = None
    full_name: str
    email: Optional[str] = None
    phone: str
    insurance_type: str
    policy_details: Optional[str] = None
    interaction_time: datetime
    requires_follow_up: bool
    follow_up_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
