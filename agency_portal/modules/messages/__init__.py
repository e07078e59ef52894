# agency_portal/modules/messages/__init__.py
"""
Messages Module

Direct messages between users, announcements and the automatic feedback
notes sent when a report is reviewed.
"""

from .router import router
from .service import MessagesService
from .repository import MessagesRepository

__all__ = [
    "router",
    "MessagesService",
    "MessagesRepository"
]
