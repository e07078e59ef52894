# agency_portal/modules/help_requests/__init__.py
"""
Help Requests Module

Any authenticated user can open a help request; administrators triage and
resolve them from the admin module.

Architecture:
- router.py: Help request endpoints
- service.py: Business rules
- repository.py: Data access
- schemas.py: Request/response models
"""

from .router import router
from .service import HelpRequestsService
from .repository import HelpRequestsRepository

__all__ = [
    "router",
    "HelpRequestsService",
    "HelpRequestsRepository"
]
