# agency_portal/modules/agent/__init__.py
"""
Agent Module - field agents and team leaders

- Daily check-in against the sales staff's attendance window
- Client registration (requires today's check-in)
- Personal performance and reports
"""

from .router import router
from .service import AgentService
from .repository import AgentRepository

__all__ = [
    "router",
    "AgentService",
    "AgentRepository"
]
