# agency_portal/modules/manager/__init__.py
"""
Manager Module

Managers run a set of sales staff (the ones they created) and everything
below them:
- Create and edit sales staff
- Agent overview, profiles and activation
- Attendance across their sales staff
- Report review and performance metrics

Admin can use every endpoint with an organization-wide scope.
"""

from .router import router
from .service import ManagerService
from .repository import ManagerRepository

__all__ = [
    "router",
    "ManagerService",
    "ManagerRepository"
]
