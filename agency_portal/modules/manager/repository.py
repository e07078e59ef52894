# agency_portal/modules/manager/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Optional
from datetime import datetime

from agency_portal.shared.database.models import Client, User

class ManagerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def count_clients_between(self, agent_ids: List[int], start: datetime, end: datetime) -> Dict[int, int]:
        """Clients per agent acquired inside [start, end]"""
        if not agent_ids:
            return {}
        rows = self.db.query(Client.agent_id, func.count(Client.id)).filter(
            Client.agent_id.in_(agent_ids),
            Client.interaction_time >= start,
            Client.interaction_time <= end
        ).group_by(Client.agent_id).all()
        return {agent_id: count for agent_id, count in rows}

    def get_recent_clients(self, agent_id: int, limit: int = 10) -> List[Client]:
        return self.db.query(Client).filter(
            Client.agent_id == agent_id
        ).order_by(Client.interaction_time.desc()).limit(limit).all()
