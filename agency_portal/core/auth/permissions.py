from typing import Dict, List, Optional

API_PREFIX = "/api/v1"

# Roles allowed under each route prefix
ROLE_ROUTE_PERMISSIONS: Dict[str, List[str]] = {
    "/admin": ["Admin"],
    "/manager": ["Admin", "Manager"],
    "/sales-staff": ["Admin", "Manager", "SalesStaff"],
    "/team-leader": ["Admin", "Manager", "SalesStaff", "TeamLeader"],
    "/agent": ["Admin", "Manager", "SalesStaff", "Agent", "TeamLeader"],
}

def allowed_roles_for_path(path: str) -> Optional[List[str]]:
    """Roles allowed for a request path, or None when no prefix applies"""
    if path.startswith(API_PREFIX):
        path = path[len(API_PREFIX):]

    for prefix, roles in ROLE_ROUTE_PERMISSIONS.items():
        if path == prefix or path.startswith(prefix + "/"):
            return roles
    return None

def can_manage_user(current_role: str, target_role: str) -> bool:
    """Whether a role may create or edit users of another role"""
    manageable = {
        "Admin": ["Manager", "SalesStaff"],
        "Manager": ["SalesStaff"],
        "SalesStaff": ["Agent", "TeamLeader"],
    }
    return target_role in manageable.get(current_role, [])
