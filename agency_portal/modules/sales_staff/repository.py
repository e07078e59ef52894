# agency_portal/modules/sales_staff/repository.py
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import datetime

from agency_portal.shared.database.models import (
    AgentGroup, AgentGroupMember, AttendanceRecord, AttendanceTimeframe,
    Client, User, AGENT_ROLES
)

class SalesStaffRepository:
    def __init__(self, db: Session):
        self.db = db

    # ==================== ATTENDANCE WINDOW ====================

    def get_timeframe(self, sales_staff_id: int) -> Optional[AttendanceTimeframe]:
        return self.db.query(AttendanceTimeframe).filter(
            AttendanceTimeframe.sales_staff_id == sales_staff_id
        ).first()

    def create_timeframe(self, sales_staff_id: int, start_time: str, end_time: str) -> AttendanceTimeframe:
        now = datetime.now()
        timeframe = AttendanceTimeframe(
            sales_staff_id=sales_staff_id,
            start_time=start_time,
            end_time=end_time,
            created_at=now,
            updated_at=now
        )
        self.db.add(timeframe)
        self.db.flush()
        return timeframe

    # ==================== AGENTS ====================

    def get_own_agent(self, agent_id: int, sales_staff_id: int, roles=AGENT_ROLES) -> Optional[User]:
        return self.db.query(User).filter(
            User.id == agent_id,
            User.role.in_(list(roles)),
            User.created_by_id == sales_staff_id
        ).first()

    # ==================== GROUPS ====================

    def create_group(self, sales_staff_id: int, team_leader_id: int, name: str) -> AgentGroup:
        group = AgentGroup(
            sales_staff_id=sales_staff_id,
            team_leader_id=team_leader_id,
            name=name
        )
        self.db.add(group)
        self.db.flush()
        return group

    def get_groups_by_sales_staff(self, sales_staff_id: int) -> List[AgentGroup]:
        return self.db.query(AgentGroup).options(
            joinedload(AgentGroup.team_leader),
            joinedload(AgentGroup.members).joinedload(AgentGroupMember.agent)
        ).filter(AgentGroup.sales_staff_id == sales_staff_id).order_by(AgentGroup.name).all()

    def get_group(self, group_id: int, sales_staff_id: int) -> Optional[AgentGroup]:
        return self.db.query(AgentGroup).filter(
            AgentGroup.id == group_id,
            AgentGroup.sales_staff_id == sales_staff_id
        ).first()

    def get_group_of_team_leader(self, team_leader_id: int) -> Optional[AgentGroup]:
        return self.db.query(AgentGroup).filter(
            AgentGroup.team_leader_id == team_leader_id
        ).order_by(AgentGroup.id).first()

    def get_membership(self, group_id: int, agent_id: int) -> Optional[AgentGroupMember]:
        return self.db.query(AgentGroupMember).filter(
            AgentGroupMember.group_id == group_id,
            AgentGroupMember.agent_id == agent_id
        ).first()

    def add_member(self, group_id: int, agent_id: int) -> AgentGroupMember:
        member = AgentGroupMember(group_id=group_id, agent_id=agent_id, created_at=datetime.now())
        self.db.add(member)
        self.db.flush()
        return member

    def count_members(self, group_id: int) -> int:
        return self.db.query(AgentGroupMember).filter(AgentGroupMember.group_id == group_id).count()

    # ==================== ATTENDANCE / CLIENTS ====================

    def get_attendance_record(self, record_id: int) -> Optional[AttendanceRecord]:
        return self.db.query(AttendanceRecord).options(
            joinedload(AttendanceRecord.agent)
        ).filter(AttendanceRecord.id == record_id).first()

    def get_clients_by_agents(self, agent_ids: List[int]) -> List[Client]:
        if not agent_ids:
            return []
        return self.db.query(Client).options(
            joinedload(Client.agent)
        ).filter(Client.agent_id.in_(agent_ids)).order_by(Client.interaction_time.desc()).all()

    # ==================== CONTACTS ====================

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_active_managers(self) -> List[User]:
        return self.db.query(User).filter(
            User.role == "Manager",
            User.is_active == True  # noqa: E712
        ).order_by(User.full_name).all()
