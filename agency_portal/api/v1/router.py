# agency_portal/api/v1/router.py
from fastapi import APIRouter, Depends

from agency_portal.api.v1.auth import router as auth_router
from agency_portal.core.auth.dependencies import check_route_permission
from agency_portal.modules.admin import admin_router
from agency_portal.modules.manager.router import router as manager_router
from agency_portal.modules.sales_staff.router import router as sales_staff_router
from agency_portal.modules.team_leader.router import router as team_leader_router
from agency_portal.modules.agent.router import router as agent_router
from agency_portal.modules.help_requests.router import router as help_requests_router
from agency_portal.modules.messages.router import router as messages_router

# Main API v1 router
api_router = APIRouter()

# Role modules share the prefix permission table as a router-level guard
role_guard = [Depends(check_route_permission)]

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["Admin"],
    dependencies=role_guard
)

api_router.include_router(
    manager_router,
    prefix="/manager",
    tags=["Manager"],
    dependencies=role_guard
)

api_router.include_router(
    sales_staff_router,
    prefix="/sales-staff",
    tags=["Sales Staff"],
    dependencies=role_guard
)

api_router.include_router(
    team_leader_router,
    prefix="/team-leader",
    tags=["Team Leader"],
    dependencies=role_guard
)

api_router.include_router(
    agent_router,
    prefix="/agent",
    tags=["Agent"],
    dependencies=role_guard
)

api_router.include_router(
    help_requests_router,
    prefix="/help-requests",
    tags=["Help Requests"]
)

api_router.include_router(
    messages_router,
    prefix="/messages",
    tags=["Messages"]
)
