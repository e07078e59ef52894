from pydantic import BaseModel, EmailStr, Field

from agency_portal.shared.schemas.common import UserSummary

class UserLogin(BaseModel):
    """Login form: email, password and work ID must all match"""
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=6, description="User password")
    work_id: str = Field(..., min_length=3, description="Work ID issued by the creator")

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "agent@example.com",
                "password": "agent123",
                "work_id": "AGT001"
            }
        }
    }

class TokenResponse(BaseModel):
    """Access token plus the logged-in user"""
    access_token: str
    token_type: str = "bearer"
    user: UserSummary

class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=6)
    new_password: str = Field(..., min_length=6)
    confirm_password: str = Field(..., min_length=6)

    def passwords_match(self) -> bool:
        return self.new_password == self.confirm_password
