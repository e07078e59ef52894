# agency_portal/modules/agent/service.py
from datetime import date, datetime
from typing import List, Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import (
    AttendanceRecordResponse, ClientResponse, ReportCreate, ReportResponse,
    attendance_to_response, report_to_response
)
from agency_portal.shared.services.attendance_service import AttendanceService
from agency_portal.shared.services.hierarchy_service import HierarchyService
from agency_portal.shared.services.performance_service import PERIODS, PerformanceService
from agency_portal.shared.services.report_service import ReportService
from .repository import AgentRepository
from .schemas import AgentPerformanceResponse, AttendanceWindowResponse, ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)

REQUIRED_CLIENT_FIELDS = ("full_name", "phone", "insurance_type", "requires_follow_up")

class AgentService:
    """Daily work of agents and team leaders: check-in, clients, reports"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = AgentRepository(db)

    # ==================== ATTENDANCE ====================

    async def get_attendance_window(self, user: User, today: Optional[date] = None) -> AttendanceWindowResponse:
        today = today or date.today()
        sales_staff = HierarchyService.sales_staff_of_agent(self.db, user)
        timeframe = self.repository.get_timeframe(sales_staff.id) if sales_staff else None
        if not timeframe:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No attendance window found for this agent"
            )

        return AttendanceWindowResponse(
            start_time=timeframe.start_time,
            end_time=timeframe.end_time,
            sales_staff_id=sales_staff.id,
            sales_staff_name=sales_staff.full_name,
            checked_in_today=self.repository.get_record_on(user.id, today) is not None
        )

    async def check_in(self, user: User, now: Optional[datetime] = None) -> AttendanceRecordResponse:
        """
        Record today's check-in.

        Lateness is decided here from the sales staff's window.
        """
        now = now or datetime.now()

        if self.repository.get_record_on(user.id, now.date()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already checked in today"
            )

        sales_staff = HierarchyService.sales_staff_of_agent(self.db, user)
        timeframe = self.repository.get_timeframe(sales_staff.id) if sales_staff else None
        is_late = AttendanceService.is_late(timeframe, now)

        try:
            record = self.repository.create_record(user.id, now, is_late)
            self.db.commit()
        except IntegrityError:
            # Another request checked in between the read above and this insert
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already checked in today"
            )

        self.db.refresh(record)

        logger.info(f"{user.work_id} checked in at {now:%H:%M}{' (late)' if is_late else ''}")
        return attendance_to_response(record)

    async def get_attendance(self, user: User, target_date: Optional[date] = None) -> List[AttendanceRecordResponse]:
        records = AttendanceService.records_for_agents(self.db, [user.id], target_date)
        return [attendance_to_response(r) for r in records]

    # ==================== CLIENTS ====================

    async def get_clients(self, user: User) -> List[ClientResponse]:
        return [ClientResponse.model_validate(c) for c in self.repository.get_clients(user.id)]

    async def create_client(self, client_data: ClientCreate, user: User, now: Optional[datetime] = None) -> ClientResponse:
        now = now or datetime.now()

        if not self.repository.get_record_on(user.id, now.date()):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You must check in for attendance before adding clients"
            )

        data = client_data.model_dump()
        data["interaction_time"] = data["interaction_time"] or now
        if data["email"]:
            data["email"] = data["email"].lower()

        client = self.repository.create_client(user.id, data)
        self.db.commit()
        self.db.refresh(client)

        logger.info(f"Client {client.id} ({client.insurance_type}) added by {user.work_id}")
        return ClientResponse.model_validate(client)

    async def update_client(self, client_id: int, updates: ClientUpdate, user: User) -> ClientResponse:
        client = self.repository.get_client(client_id, user.id)
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )

        for field, value in updates.model_dump(exclude_unset=True).items():
            # only optional columns may be cleared with null
            if value is None and field in REQUIRED_CLIENT_FIELDS:
                continue
            setattr(client, field, value)

        if client.requires_follow_up and client.follow_up_date is None:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="follow_up_date is required when requires_follow_up is true"
            )

        self.db.commit()
        self.db.refresh(client)
        return ClientResponse.model_validate(client)

    # ==================== PERFORMANCE ====================

    async def get_performance(self, user: User, period: str, now: Optional[datetime] = None) -> AgentPerformanceResponse:
        if period not in PERIODS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid period"
            )

        metrics = PerformanceService.compute_metrics(self.db, user, period, now)
        return AgentPerformanceResponse(
            period=period,
            start_date=metrics["start_date"],
            end_date=metrics["end_date"],
            clients_added=metrics["clients_acquired"],
            attendance_rate=metrics["attendance_rate"],
            clients=[ClientResponse.model_validate(c) for c in metrics["clients"]]
        )

    # ==================== REPORTS ====================

    async def get_reports(self, user: User) -> List[ReportResponse]:
        return [report_to_response(r) for r in ReportService.reports_by_users(self.db, [user.id])]

    async def create_report(self, report_data: ReportCreate, user: User) -> ReportResponse:
        report = ReportService.create_report(self.db, user, report_data)
        self.db.commit()
        self.db.refresh(report)
        return report_to_response(report)
