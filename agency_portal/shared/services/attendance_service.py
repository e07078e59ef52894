# agency_portal/shared/services/attendance_service.py
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from agency_portal.shared.database.models import AttendanceRecord, AttendanceTimeframe

class AttendanceService:
    """Check-in window rules and attendance queries"""

    @staticmethod
    def parse_hhmm(value: str) -> time:
        """Parse an 'HH:MM' string; raises ValueError on bad input"""
        return datetime.strptime(value, "%H:%M").time()

    @staticmethod
    def day_bounds(target_date: date) -> Tuple[datetime, datetime]:
        return (
            datetime.combine(target_date, datetime.min.time()),
            datetime.combine(target_date, datetime.max.time())
        )

    @staticmethod
    def is_late(timeframe: Optional[AttendanceTimeframe], check_in_time: datetime) -> bool:
        """
        A check-in is late when it happens after the window closes.

        Checking in before the window opens counts as on time. Without a
        configured window nobody is late.
        """
        if timeframe is None:
            return False
        end_time = AttendanceService.parse_hhmm(timeframe.end_time)
        return check_in_time.time().replace(second=0, microsecond=0) > end_time

    @staticmethod
    def status_of(record: Optional[AttendanceRecord]) -> str:
        if record is None:
            return "Absent"
        if record.is_excused:
            return "Excused"
        if record.is_late:
            return "Late"
        return "Present"

    @staticmethod
    def records_for_agents(
        db: Session,
        agent_ids: List[int],
        target_date: Optional[date] = None
    ) -> List[AttendanceRecord]:
        if not agent_ids:
            return []

        query = db.query(AttendanceRecord).options(
            joinedload(AttendanceRecord.agent)
        ).filter(AttendanceRecord.agent_id.in_(agent_ids))

        if target_date is not None:
            start, end = AttendanceService.day_bounds(target_date)
            query = query.filter(
                AttendanceRecord.check_in_time >= start,
                AttendanceRecord.check_in_time <= end
            )

        return query.order_by(AttendanceRecord.check_in_time.desc(), AttendanceRecord.id.desc()).all()

    @staticmethod
    def records_between(
        db: Session,
        agent_id: int,
        start: datetime,
        end: datetime
    ) -> List[AttendanceRecord]:
        return db.query(AttendanceRecord).filter(
            AttendanceRecord.agent_id == agent_id,
            AttendanceRecord.check_in_time >= start,
            AttendanceRecord.check_in_time <= end
        ).order_by(AttendanceRecord.check_in_time).all()

    @staticmethod
    def rate(records: List[AttendanceRecord]) -> float:
        """Percentage of records that are on time or excused"""
        if not records:
            return 0.0
        good = [r for r in records if r.is_excused or not r.is_late]
        return len(good) / len(records) * 100
