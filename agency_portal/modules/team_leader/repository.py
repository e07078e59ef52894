# agency_portal/modules/team_leader/repository.py
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional

from agency_portal.shared.database.models import AgentGroup, AgentGroupMember, Report

class TeamLeaderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_groups_led_by(self, team_leader_id: int) -> List[AgentGroup]:
        return self.db.query(AgentGroup).options(
            joinedload(AgentGroup.members)
        ).filter(AgentGroup.team_leader_id == team_leader_id).order_by(AgentGroup.name).all()

    def get_group_led_by(self, group_id: int, team_leader_id: int) -> Optional[AgentGroup]:
        return self.db.query(AgentGroup).options(
            joinedload(AgentGroup.members).joinedload(AgentGroupMember.agent)
        ).filter(
            AgentGroup.id == group_id,
            AgentGroup.team_leader_id == team_leader_id
        ).first()

    def get_reports_by_ids(self, report_ids: List[int]) -> List[Report]:
        if not report_ids:
            return []
        return self.db.query(Report).filter(Report.id.in_(report_ids)).all()
