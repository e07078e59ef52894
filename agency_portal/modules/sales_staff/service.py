# agency_portal/modules/sales_staff/service.py
from datetime import date
from typing import List, Optional, Tuple
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import AgentGroup, User
from agency_portal.shared.schemas.common import (
    AttendanceRecordResponse, ReportCreate, ReportResponse, ReportReview,
    UserSummary, UserUpdate, attendance_to_response, report_to_response
)
from agency_portal.shared.services.attendance_service import AttendanceService
from agency_portal.shared.services.hierarchy_service import HierarchyService
from agency_portal.shared.services.report_service import ReportService
from agency_portal.shared.services.user_service import UserService
from agency_portal.modules.messages.service import MessagesService
from .repository import SalesStaffRepository
from .schemas import (
    AgentCreate, AgentGroupResponse, AgentType, AttendanceTimeframeCreate,
    AttendanceTimeframeResponse, GroupMemberCreate, GroupMemberResponse,
    GroupSummary, SalesStaffClient, TeamLeaderResponse
)

logger = logging.getLogger(__name__)

class SalesStaffService:
    """
    Sales staff operations: attendance window, agents, groups, attendance
    excuses, report review and client listings.

    Read endpoints also serve Admin and Manager, scoped through
    HierarchyService; write endpoints act on the caller's own agents.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesStaffRepository(db)

    def _get_own_agent(self, agent_id: int, user: User) -> User:
        agent = self.repository.get_own_agent(agent_id, user.id)
        if not agent:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agent not found"
            )
        return agent

    def _get_own_group(self, group_id: int, user: User) -> AgentGroup:
        group = self.repository.get_group(group_id, user.id)
        if not group:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agent group not found"
            )
        return group

    # ==================== ATTENDANCE WINDOW ====================

    async def get_attendance_timeframe(
        self,
        user: User,
        sales_staff_id: Optional[int] = None
    ) -> AttendanceTimeframeResponse:
        if user.role != "SalesStaff" and sales_staff_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="sales_staff_id is required"
            )

        staff_id = HierarchyService.resolve_sales_staff_ids(self.db, user, sales_staff_id)[0]
        timeframe = self.repository.get_timeframe(staff_id)
        if not timeframe:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Attendance timeframe not found"
            )
        return AttendanceTimeframeResponse.model_validate(timeframe)

    async def set_attendance_timeframe(
        self,
        data: AttendanceTimeframeCreate,
        user: User
    ) -> Tuple[AttendanceTimeframeResponse, bool]:
        """
        Create or replace the caller's check-in window.

        Returns:
            (timeframe, created) where created is False on update
        """
        timeframe = self.repository.get_timeframe(user.id)
        created = timeframe is None

        if created:
            timeframe = self.repository.create_timeframe(user.id, data.start_time, data.end_time)
        else:
            timeframe.start_time = data.start_time
            timeframe.end_time = data.end_time

        self.db.commit()
        self.db.refresh(timeframe)

        logger.info(
            f"Attendance window {'created' if created else 'updated'} for {user.work_id}: "
            f"{timeframe.start_time}-{timeframe.end_time}"
        )
        return AttendanceTimeframeResponse.model_validate(timeframe), created

    # ==================== AGENTS ====================

    async def get_agents(self, user: User, sales_staff_id: Optional[int] = None) -> List[UserSummary]:
        agents = HierarchyService.agents_in_scope(self.db, user, sales_staff_id)
        return [UserSummary.model_validate(a) for a in agents]

    async def create_agent(self, agent_data: AgentCreate, user: User) -> UserSummary:
        """Create an agent; a team leader also gets its own group"""
        role = agent_data.type.value
        try:
            agent = UserService.create_user(self.db, agent_data, role, user)
            if agent_data.type == AgentType.TEAM_LEADER:
                group = self.repository.create_group(user.id, agent.id, f"{agent.full_name}'s Group")
                logger.info(f"Agent group {group.id} created for team leader {agent.work_id}")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating {role} {agent_data.work_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create agent"
            )

        self.db.refresh(agent)
        return UserSummary.model_validate(agent)

    async def update_agent(self, agent_id: int, updates: UserUpdate, user: User) -> UserSummary:
        agent = self._get_own_agent(agent_id, user)
        UserService.update_user(self.db, agent, updates)
        self.db.commit()
        self.db.refresh(agent)
        return UserSummary.model_validate(agent)

    # ==================== TEAM LEADERS ====================

    async def get_team_leaders(self, user: User, sales_staff_id: Optional[int] = None) -> List[TeamLeaderResponse]:
        staff_ids = HierarchyService.resolve_sales_staff_ids(self.db, user, sales_staff_id)
        leaders = HierarchyService.agents_of_sales_staff(self.db, staff_ids, roles=["TeamLeader"])

        result = []
        for leader in leaders:
            group = self.repository.get_group_of_team_leader(leader.id)
            result.append(TeamLeaderResponse(
                **UserSummary.model_validate(leader).model_dump(),
                group=GroupSummary(
                    id=group.id,
                    name=group.name,
                    member_count=self.repository.count_members(group.id)
                ) if group else None
            ))
        return result

    async def update_team_leader_status(self, team_leader_id: int, is_active: bool, user: User) -> UserSummary:
        leader = self.repository.get_own_agent(team_leader_id, user.id, roles=["TeamLeader"])
        if not leader:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Team leader not found"
            )

        leader.is_active = is_active
        self.db.commit()
        self.db.refresh(leader)
        logger.info(f"Team leader {leader.work_id} {'activated' if is_active else 'deactivated'} by {user.work_id}")
        return UserSummary.model_validate(leader)

    # ==================== GROUPS ====================

    async def get_agent_groups(self, user: User) -> List[AgentGroupResponse]:
        groups = self.repository.get_groups_by_sales_staff(user.id)
        return [
            AgentGroupResponse(
                id=group.id,
                name=group.name,
                sales_staff_id=group.sales_staff_id,
                team_leader=UserSummary.model_validate(group.team_leader) if group.team_leader else None,
                members=[UserSummary.model_validate(m.agent) for m in group.members]
            )
            for group in groups
        ]

    async def add_group_member(self, group_id: int, data: GroupMemberCreate, user: User) -> GroupMemberResponse:
        if data.agent_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Agent ID is required"
            )

        group = self._get_own_group(group_id, user)
        agent = self._get_own_agent(data.agent_id, user)

        if self.repository.get_membership(group.id, agent.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Agent is already a member of this group"
            )

        member = self.repository.add_member(group.id, agent.id)
        self.db.commit()
        self.db.refresh(member)

        logger.info(f"Agent {agent.work_id} added to group {group.id}")
        return GroupMemberResponse.model_validate(member)

    async def remove_group_member(self, group_id: int, agent_id: int, user: User) -> None:
        group = self._get_own_group(group_id, user)
        member = self.repository.get_membership(group.id, agent_id)
        if not member:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agent is not a member of this group"
            )

        self.db.delete(member)
        self.db.commit()
        logger.info(f"Agent {agent_id} removed from group {group.id}")

    # ==================== ATTENDANCE ====================

    async def get_attendance(
        self,
        user: User,
        sales_staff_id: Optional[int] = None,
        target_date: Optional[date] = None
    ) -> List[AttendanceRecordResponse]:
        agents = HierarchyService.agents_in_scope(self.db, user, sales_staff_id)
        records = AttendanceService.records_for_agents(self.db, [a.id for a in agents], target_date)
        return [attendance_to_response(r) for r in records]

    async def excuse_attendance(self, record_id: int, reason: Optional[str], user: User) -> AttendanceRecordResponse:
        if not reason or not reason.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Excuse reason is required"
            )

        record = self.repository.get_attendance_record(record_id)
        # Records of other sales staff's agents look missing
        if not record or record.agent is None or record.agent.created_by_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Attendance record not found"
            )

        record.is_excused = True
        record.excused_by_id = user.id
        record.excuse_reason = reason.strip()
        self.db.commit()
        self.db.refresh(record)

        logger.info(f"Attendance {record.id} of {record.agent.work_id} excused by {user.work_id}")
        return attendance_to_response(record)

    # ==================== REPORTS ====================

    async def get_agent_reports(self, user: User, sales_staff_id: Optional[int] = None) -> List[ReportResponse]:
        agent_ids = [a.id for a in HierarchyService.agents_in_scope(self.db, user, sales_staff_id)]
        return [report_to_response(r) for r in ReportService.reports_by_users(self.db, agent_ids)]

    async def get_team_leader_reports(self, user: User, sales_staff_id: Optional[int] = None) -> List[ReportResponse]:
        staff_ids = HierarchyService.resolve_sales_staff_ids(self.db, user, sales_staff_id)
        leader_ids = [
            leader.id for leader in
            HierarchyService.agents_of_sales_staff(self.db, staff_ids, roles=["TeamLeader"])
        ]
        reports = ReportService.reports_by_users(self.db, leader_ids, is_aggregated=True)
        return [report_to_response(r) for r in reports]

    async def create_report(self, report_data: ReportCreate, user: User) -> ReportResponse:
        report = ReportService.create_report(self.db, user, report_data)
        self.db.commit()
        self.db.refresh(report)
        return report_to_response(report)

    async def review_report(self, report_id: int, review: ReportReview, user: User) -> ReportResponse:
        agent_ids = [a.id for a in HierarchyService.agents_of_sales_staff(self.db, [user.id])]
        report = ReportService.review_report(self.db, user, report_id, review, agent_ids)
        MessagesService(self.db).notify_report_feedback(user, report)
        self.db.commit()
        self.db.refresh(report)
        return report_to_response(report)

    # ==================== CLIENTS / CONTACTS ====================

    async def get_clients(self, user: User, sales_staff_id: Optional[int] = None) -> List[SalesStaffClient]:
        agent_ids = [a.id for a in HierarchyService.agents_in_scope(self.db, user, sales_staff_id)]
        result = []
        for client in self.repository.get_clients_by_agents(agent_ids):
            response = SalesStaffClient.model_validate(client)
            response.agent_name = client.agent.full_name
            result.append(response)
        return result

    async def get_managers(self, user: User) -> List[UserSummary]:
        """Managers the caller can message"""
        if user.created_by_id is not None:
            creator = self.repository.get_user(user.created_by_id)
            if creator and creator.role == "Manager" and creator.is_active:
                return [UserSummary.model_validate(creator)]
        return [UserSummary.model_validate(m) for m in self.repository.get_active_managers()]
