# agency_portal/modules/admin/schemas.py
from pydantic import BaseModel
from typing import Dict

from agency_portal.shared.schemas.common import UserCreate

class ManagerCreate(UserCreate):
    """Create a manager account"""

    model_config = {
        "json_schema_extra": {
            "example": {
                "work_id": "MGR002",
                "email": "new.manager@example.com",
                "full_name": "Grace Manager",
                "password": "manager123"
            }
        }
    }

class AdminDashboard(BaseModel):
    users_by_role: Dict[str, int]
    active_users: int
    inactive_users: int
    open_help_requests: int
    check_ins_today: int
    late_check_ins_today: int
