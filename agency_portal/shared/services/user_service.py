# agency_portal/shared/services/user_service.py
from typing import Optional
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from agency_portal.core.auth.permissions import can_manage_user
from agency_portal.core.auth.service import AuthService
from agency_portal.shared.database.models import User
from agency_portal.shared.schemas.common import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

class UserService:
    """User creation and updates shared by every management module"""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_by_work_id(db: Session, work_id: str) -> Optional[User]:
        return db.query(User).filter(User.work_id == work_id).first()

    @staticmethod
    def create_user(db: Session, user_data: UserCreate, role: str, creator: User) -> User:
        """
        Create a user of the given role on behalf of its creator.

        Raises:
            HTTPException 403: the creator's role may not create this role
            HTTPException 400: email or work ID already taken
        """
        if not can_manage_user(creator.role, role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{creator.role} cannot create {role} users"
            )

        if UserService.get_by_email(db, user_data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User with this email already exists"
            )

        if UserService.get_by_work_id(db, user_data.work_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User with this work ID already exists"
            )

        user = User(
            work_id=user_data.work_id,
            email=user_data.email.lower(),
            full_name=user_data.full_name,
            password_hash=AuthService.get_password_hash(user_data.password),
            role=role,
            created_by_id=creator.id,
            is_active=True
        )
        db.add(user)
        db.flush()

        logger.info(f"{role} {user.work_id} created by {creator.role} {creator.work_id}")
        return user

    @staticmethod
    def update_user(db: Session, user: User, updates: UserUpdate) -> User:
        """Apply a partial update; email stays unique"""
        data = updates.model_dump(exclude_unset=True)

        new_email = data.pop("email", None)
        if new_email is not None:
            new_email = new_email.lower()
            existing = UserService.get_by_email(db, new_email)
            if existing and existing.id != user.id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="User with this email already exists"
                )
            user.email = new_email

        password = data.pop("password", None)
        if password:
            user.password_hash = AuthService.get_password_hash(password)

        for field, value in data.items():
            if value is not None:
                setattr(user, field, value)

        db.flush()
        logger.info(f"User {user.work_id} updated: {sorted(updates.model_dump(exclude_unset=True).keys())}")
        return user
