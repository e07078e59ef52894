# agency_portal/modules/agent/schemas.py
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from agency_portal.shared.schemas.common import ClientResponse

class AttendanceWindowResponse(BaseModel):
    start_time: str
    end_time: str
    sales_staff_id: int
    sales_staff_name: str
    checked_in_today: bool

class ClientCreate(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=5, max_length=50)
    insurance_type: str = Field(..., min_length=1, max_length=100, examples=["Life", "Health", "Auto"])
    policy_details: Optional[str] = None
    interaction_time: Optional[datetime] = Field(None, description="Defaults to now")
    requires_follow_up: bool = False
    follow_up_date: Optional[datetime] = None

    @field_validator('full_name', 'phone', 'insurance_type')
    @classmethod
    def strip_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Value cannot be blank')
        return v.strip()

    @model_validator(mode='after')
    def validate_follow_up(self):
        if self.requires_follow_up and self.follow_up_date is None:
            raise ValueError('follow_up_date is required when requires_follow_up is true')
        return self

class ClientUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=5, max_length=50)
    insurance_type: Optional[str] = Field(None, min_length=1, max_length=100)
    policy_details: Optional[str] = None
    requires_follow_up: Optional[bool] = None
    follow_up_date: Optional[datetime] = None

class AgentPerformanceResponse(BaseModel):
    period: str
    start_date: datetime
    end_date: datetime
    clients_added: int
    attendance_rate: float
    clients: List[ClientResponse]
