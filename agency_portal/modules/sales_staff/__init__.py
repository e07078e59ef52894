# agency_portal/modules/sales_staff/__init__.py
"""
Sales Staff Module

Sales staff run the daily work of their agents:
- Attendance window and excuses
- Agents, team leaders and agent groups
- Report review and client listings

Read endpoints also answer Admin and Manager within their scope.
"""

from .router import router
from .service import SalesStaffService
from .repository import SalesStaffRepository

__all__ = [
    "router",
    "SalesStaffService",
    "SalesStaffRepository"
]
