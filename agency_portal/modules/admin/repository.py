# agency_portal/modules/admin/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Optional
from datetime import date

from agency_portal.shared.database.models import AttendanceRecord, User
from agency_portal.shared.services.attendance_service import AttendanceService

class AdminRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_users_by_role(self, role: str) -> List[User]:
        return self.db.query(User).filter(User.role == role).order_by(User.full_name).all()

    def get_user_with_role(self, user_id: int, role: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id, User.role == role).first()

    def count_users_by_role(self) -> Dict[str, int]:
        rows = self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
        return {role: count for role, count in rows}

    def count_users_by_status(self, is_active: bool) -> int:
        return self.db.query(User).filter(User.is_active == is_active).count()

    def get_check_in_counts(self, target_date: date) -> Dict[str, int]:
        start, end = AttendanceService.day_bounds(target_date)
        records = self.db.query(AttendanceRecord).filter(
            AttendanceRecord.check_in_time >= start,
            AttendanceRecord.check_in_time <= end
        ).all()
        return {
            "total": len(records),
            "late": len([r for r in records if r.is_late and not r.is_excused])
        }
