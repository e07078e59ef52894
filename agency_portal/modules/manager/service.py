# agency_portal/modules/manager/service.py
from datetime import date, datetime
from typing import List, Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import (
    ClientResponse, ReportCreate, ReportResponse, ReportReview,
    UserSummary, UserUpdate, report_to_response
)
from agency_portal.shared.services.attendance_service import AttendanceService
from agency_portal.shared.services.hierarchy_service import HierarchyService
from agency_portal.shared.services.performance_service import PerformanceService
from agency_portal.shared.services.report_service import ReportService
from agency_portal.shared.services.user_service import UserService
from agency_portal.modules.messages.service import MessagesService
from .repository import ManagerRepository
from .schemas import (
    AgentOverview, AgentProfile, ManagerAttendanceRecord,
    PerformanceMetricResponse, PerformanceSummary, SalesStaffCreate
)

logger = logging.getLogger(__name__)

class ManagerService:
    """Manager-level views over its sales staff and their agents"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = ManagerRepository(db)

    def _get_sales_staff_in_scope(self, staff_id: int, user: User) -> User:
        staff = self.repository.get_user(staff_id)
        if not staff or staff.role != "SalesStaff" or not HierarchyService.is_in_scope(self.db, user, staff):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Sales staff not found"
            )
        return staff

    def _get_agent_in_scope(self, agent_id: int, user: User) -> User:
        agent = self.repository.get_user(agent_id)
        if not agent or not agent.is_agent or not HierarchyService.is_in_scope(self.db, user, agent):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agent not found"
            )
        return agent

    # ==================== SALES STAFF ====================

    async def get_sales_staff(self, user: User) -> List[UserSummary]:
        staff = HierarchyService.sales_staff_in_scope(self.db, user)
        return [UserSummary.model_validate(s) for s in staff]

    async def create_sales_staff(self, staff_data: SalesStaffCreate, user: User) -> UserSummary:
        try:
            staff = UserService.create_user(self.db, staff_data, "SalesStaff", user)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating sales staff {staff_data.work_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create sales staff"
            )

        self.db.refresh(staff)
        return UserSummary.model_validate(staff)

    async def update_sales_staff(self, staff_id: int, updates: UserUpdate, user: User) -> UserSummary:
        staff = self._get_sales_staff_in_scope(staff_id, user)
        try:
            UserService.update_user(self.db, staff, updates)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating sales staff {staff_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update sales staff"
            )

        self.db.refresh(staff)
        return UserSummary.model_validate(staff)

    async def get_sales_staff_agents(self, staff_id: int, user: User) -> List[UserSummary]:
        staff = self._get_sales_staff_in_scope(staff_id, user)
        agents = HierarchyService.agents_of_sales_staff(self.db, [staff.id])
        return [UserSummary.model_validate(a) for a in agents]

    # ==================== AGENTS ====================

    async def get_agents(self, user: User, sales_staff_id: Optional[int] = None) -> List[AgentOverview]:
        """Agents in scope with today's attendance status and client count"""
        staff_ids = HierarchyService.resolve_sales_staff_ids(self.db, user, sales_staff_id)
        staff_by_id = {s.id: s for s in HierarchyService.sales_staff_in_scope(self.db, user) if s.id in staff_ids}
        agents = HierarchyService.agents_of_sales_staff(self.db, staff_ids)
        agent_ids = [a.id for a in agents]

        today = date.today()
        records = AttendanceService.records_for_agents(self.db, agent_ids, today)
        record_by_agent = {}
        for record in records:
            record_by_agent.setdefault(record.agent_id, record)

        start, end = AttendanceService.day_bounds(today)
        clients_today = self.repository.count_clients_between(agent_ids, start, end)

        overview = []
        for agent in agents:
            staff = staff_by_id.get(agent.created_by_id)
            overview.append(AgentOverview(
                **UserSummary.model_validate(agent).model_dump(),
                sales_staff_id=agent.created_by_id,
                sales_staff_name=staff.full_name if staff else None,
                attendance_status=AttendanceService.status_of(record_by_agent.get(agent.id)),
                clients_added_today=clients_today.get(agent.id, 0)
            ))
        return overview

    async def get_agent_profile(self, agent_id: int, user: User, period: str = "monthly") -> AgentProfile:
        agent = self._get_agent_in_scope(agent_id, user)
        staff = HierarchyService.sales_staff_of_agent(self.db, agent)
        metrics = PerformanceService.compute_metrics(self.db, agent, period)

        return AgentProfile(
            agent=UserSummary.model_validate(agent),
            sales_staff=UserSummary.model_validate(staff) if staff else None,
            performance=PerformanceSummary(
                period=period,
                start_date=metrics["start_date"],
                end_date=metrics["end_date"],
                clients_added=metrics["clients_acquired"],
                attendance_rate=metrics["attendance_rate"],
                reports_submitted=metrics["reports_submitted"],
                report_approval_rate=metrics["report_approval_rate"],
                performance_score=metrics["performance_score"]
            ),
            recent_clients=[
                ClientResponse.model_validate(c) for c in self.repository.get_recent_clients(agent.id)
            ]
        )

    async def update_agent_status(self, agent_id: int, is_active: bool, user: User) -> UserSummary:
        agent = self._get_agent_in_scope(agent_id, user)
        agent.is_active = is_active
        self.db.commit()
        self.db.refresh(agent)

        logger.info(f"Agent {agent.work_id} {'activated' if is_active else 'deactivated'} by {user.work_id}")
        return UserSummary.model_validate(agent)

    # ==================== ATTENDANCE ====================

    async def get_attendance(
        self,
        user: User,
        sales_staff_id: Optional[int] = None,
        target_date: Optional[date] = None
    ) -> List[ManagerAttendanceRecord]:
        staff_ids = HierarchyService.resolve_sales_staff_ids(self.db, user, sales_staff_id)
        staff_by_id = {s.id: s for s in HierarchyService.sales_staff_in_scope(self.db, user)}
        agents = HierarchyService.agents_of_sales_staff(self.db, staff_ids)
        records = AttendanceService.records_for_agents(self.db, [a.id for a in agents], target_date)

        result = []
        for record in records:
            staff = staff_by_id.get(record.agent.created_by_id)
            result.append(ManagerAttendanceRecord(
                id=record.id,
                agent_id=record.agent_id,
                agent_name=record.agent.full_name,
                check_in_time=record.check_in_time,
                is_late=record.is_late,
                is_excused=record.is_excused,
                excused_by_id=record.excused_by_id,
                excuse_reason=record.excuse_reason,
                sales_staff_id=staff.id if staff else None,
                sales_staff_name=staff.full_name if staff else None
            ))
        return result

    # ==================== REPORTS ====================

    async def get_my_reports(self, user: User) -> List[ReportResponse]:
        return [report_to_response(r) for r in ReportService.reports_by_users(self.db, [user.id])]

    async def create_report(self, report_data: ReportCreate, user: User) -> ReportResponse:
        report = ReportService.create_report(self.db, user, report_data)
        self.db.commit()
        self.db.refresh(report)
        return report_to_response(report)

    async def get_sales_staff_reports(self, user: User) -> List[ReportResponse]:
        staff_ids = [s.id for s in HierarchyService.sales_staff_in_scope(self.db, user)]
        return [report_to_response(r) for r in ReportService.reports_by_users(self.db, staff_ids)]

    async def get_agent_reports(self, user: User) -> List[ReportResponse]:
        agent_ids = [a.id for a in HierarchyService.agents_in_scope(self.db, user)]
        return [report_to_response(r) for r in ReportService.reports_by_users(self.db, agent_ids)]

    async def review_report(self, report_id: int, review: ReportReview, user: User) -> ReportResponse:
        """Managers review the reports of their sales staff"""
        staff_ids = [s.id for s in HierarchyService.sales_staff_in_scope(self.db, user)]
        report = ReportService.review_report(self.db, user, report_id, review, staff_ids)
        MessagesService(self.db).notify_report_feedback(user, report)
        self.db.commit()
        self.db.refresh(report)
        return report_to_response(report)

    # ==================== PERFORMANCE ====================

    async def get_performance_metrics(
        self,
        user: User,
        period: str = "monthly",
        now: Optional[datetime] = None
    ) -> List[PerformanceMetricResponse]:
        """Snapshot and return the metrics of every active agent in scope"""
        agents = [a for a in HierarchyService.agents_in_scope(self.db, user) if a.is_active]

        result = []
        for agent in agents:
            metric = PerformanceService.snapshot(self.db, agent, period, now)
            response = PerformanceMetricResponse.model_validate(metric)
            response.user_name = agent.full_name
            response.work_id = agent.work_id
            result.append(response)

        self.db.commit()
        return sorted(result, key=lambda m: m.performance_score, reverse=True)
