# agency_portal/modules/help_requests/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

class HelpRequestStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"

class HelpRequestCreate(BaseModel):
    request_type: str = Field(..., min_length=2, max_length=100, description="Category of the request")
    issue: str = Field(..., min_length=5, description="Description of the problem")

    @field_validator('issue')
    @classmethod
    def validate_issue(cls, v):
        if not v.strip():
            raise ValueError('Issue cannot be empty')
        return v.strip()

class HelpRequestUpdate(BaseModel):
    status: Optional[HelpRequestStatus] = None
    resolution: Optional[str] = Field(None, max_length=2000)
    assigned_to_id: Optional[int] = None

class HelpRequestResponse(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    assigned_to_id: Optional[int] = None
    request_type: str
    issue: str
    status: str
    resolution: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

def help_request_to_response(help_request) -> HelpRequestResponse:
    response = HelpRequestResponse.model_validate(help_request)
    if help_request.user is not None:
        response.user_name = help_request.user.full_name
    return response
