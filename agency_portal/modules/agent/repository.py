# agency_portal/modules/agent/repository.py
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from datetime import date, datetime

from agency_portal.shared.database.models import AttendanceRecord, AttendanceTimeframe, Client
from agency_portal.shared.services.attendance_service import AttendanceService

class AgentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_timeframe(self, sales_staff_id: int) -> Optional[AttendanceTimeframe]:
        return self.db.query(AttendanceTimeframe).filter(
            AttendanceTimeframe.sales_staff_id == sales_staff_id
        ).first()

    def get_record_on(self, agent_id: int, target_date: date) -> Optional[AttendanceRecord]:
        start, end = AttendanceService.day_bounds(target_date)
        return self.db.query(AttendanceRecord).filter(
            AttendanceRecord.agent_id == agent_id,
            AttendanceRecord.check_in_time >= start,
            AttendanceRecord.check_in_time <= end
        ).first()

    def create_record(self, agent_id: int, check_in_time: datetime, is_late: bool) -> AttendanceRecord:
        record = AttendanceRecord(
            agent_id=agent_id,
            check_in_time=check_in_time,
            check_in_date=check_in_time.date(),
            is_late=is_late,
            is_excused=False,
            created_at=check_in_time
        )
        self.db.add(record)
        self.db.flush()
        return record

    def get_clients(self, agent_id: int) -> List[Client]:
        return self.db.query(Client).filter(
            Client.agent_id == agent_id
        ).order_by(Client.interaction_time.desc(), Client.id.desc()).all()

    def get_client(self, client_id: int, agent_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(
            Client.id == client_id,
            Client.agent_id == agent_id
        ).first()

    def create_client(self, agent_id: int, data: Dict[str, Any]) -> Client:
        now = datetime.now()
        client = Client(agent_id=agent_id, created_at=now, updated_at=now, **data)
        self.db.add(client)
        self.db.flush()
        return client
