# agency_portal/modules/team_leader/__init__.py
"""
Team Leader Module

- Groups led by the team leader and their members
- Member reports by type
- Aggregated group reports
"""

from .router import router
from .service import TeamLeaderService
from .repository import TeamLeaderRepository

__all__ = [
    "router",
    "TeamLeaderService",
    "TeamLeaderRepository"
]
