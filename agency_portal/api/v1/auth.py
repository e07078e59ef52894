# agency_portal/api/v1/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from agency_portal.config.database import get_db
from agency_portal.core.auth.service import AuthService
from agency_portal.core.auth.schemas import ChangePasswordRequest, TokenResponse, UserLogin
from agency_portal.core.auth.dependencies import AuthenticationError, get_current_user
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import MessageResponse, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/login", response_model=TokenResponse)
async def login(
    user_login: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login to get an access token

    **Body:**
    ```json
        {
            "email": "agent@example.com",
            "password": "agent123",
            "work_id": "AGT001"
        }
    ```

    **Returns:**
    - JWT access token
    - User information
    """

    # Email and work ID must belong to the same user
    user = db.query(User).filter(User.email == user_login.email.lower()).first()

    if not user or user.work_id != user_login.work_id.strip():
        logger.info(f"Failed login for {user_login.email}: unknown user or work ID")
        raise AuthenticationError("User not found or incorrect work ID")

    if not user.is_active:
        raise AuthenticationError("User account has been deactivated")

    if not AuthService.verify_password(user_login.password, user.password_hash):
        logger.info(f"Failed login for {user.work_id}: incorrect password")
        raise AuthenticationError("Incorrect password")

    token_data = {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "work_id": user.work_id
    }
    access_token = AuthService.create_access_token(data=token_data)

    logger.info(f"{user.role} {user.work_id} logged in")
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserSummary.model_validate(user)
    )

@router.get("/me", response_model=UserSummary)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Current user information
    **Required headers:**
    - Authorization: Bearer {token}
    """
    return UserSummary.model_validate(current_user)

@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: User = Depends(get_current_user)
):
    """
    Logout (stateless JWT, informative only)

    The client drops the token.
    """
    logger.info(f"{current_user.work_id} logged out")
    return MessageResponse(message="Logged out successfully")

@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not AuthService.verify_password(password_data.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    if not password_data.passwords_match():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New passwords do not match"
        )

    current_user.password_hash = AuthService.get_password_hash(password_data.new_password)
    db.commit()

    logger.info(f"Password changed for {current_user.work_id}")
    return MessageResponse(message="Password changed successfully")
