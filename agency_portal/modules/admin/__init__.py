# agency_portal/modules/admin/__init__.py

"""
Admin Module - Administrator features

- Create, edit and deactivate managers
- Triage and resolve help requests
- Organization-wide dashboard counters

Architecture:
- router.py: FastAPI endpoints
- service.py: Business logic
- repository.py: Data access
- schemas.py: Pydantic request/response models
"""

from .router import router as admin_router
from .service import AdminService
from .repository import AdminRepository

__all__ = [
    "admin_router",
    "AdminService",
    "AdminRepository"
]
