from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional

from agency_portal.config.database import get_db
from agency_portal.shared.database.models import User
from agency_portal.core.auth.service import AuthService
from agency_portal.core.auth.permissions import allowed_roles_for_path

security = HTTPBearer(auto_error=False)

class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Access denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )

def access_denied(allowed_roles: List[str]) -> AuthorizationError:
    return AuthorizationError(f"Access denied. Required role: {' or '.join(allowed_roles)}")

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the user from the bearer token"""

    if credentials is None:
        raise AuthenticationError()

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("user_id")
    if user_id is None:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()

    if user is None:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account has been deactivated")

    return user

def require_roles(allowed_roles: List[str]):
    """Dependency factory that only lets the listed roles through"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise access_denied(allowed_roles)
        return current_user
    return role_checker

def check_route_permission(request: Request, current_user: User = Depends(get_current_user)) -> User:
    """Router-level guard driven by the route prefix permission table"""
    allowed_roles = allowed_roles_for_path(request.url.path)
    if allowed_roles is not None and current_user.role not in allowed_roles:
        raise access_denied(allowed_roles)
    return current_user

# Role-specific dependencies
def get_admin_user(current_user: User = Depends(require_roles(["Admin"]))):
    return current_user

def get_manager_user(current_user: User = Depends(require_roles(["Admin", "Manager"]))):
    return current_user

def get_sales_staff_user(current_user: User = Depends(require_roles(["SalesStaff"]))):
    """Only an actual sales staff; Admin/Manager may read but not act as one"""
    return current_user

def get_team_leader_user(current_user: User = Depends(require_roles(["TeamLeader"]))):
    return current_user

def get_agent_user(current_user: User = Depends(require_roles(["Agent", "TeamLeader"]))):
    return current_user
