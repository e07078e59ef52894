# agency_portal/shared/services/hierarchy_service.py
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from agency_portal.shared.database.models import User, AGENT_ROLES

class HierarchyService:
    """
    Who sees whom.

    The creator link is the hierarchy: managers create sales staff, sales
    staff create agents and team leaders. Admin sees everything.
    """

    @staticmethod
    def sales_staff_of_manager(db: Session, manager_id: int) -> List[User]:
        return db.query(User).filter(
            User.role == "SalesStaff",
            User.created_by_id == manager_id
        ).order_by(User.full_name).all()

    @staticmethod
    def all_sales_staff(db: Session) -> List[User]:
        return db.query(User).filter(User.role == "SalesStaff").order_by(User.full_name).all()

    @staticmethod
    def agents_of_sales_staff(
        db: Session,
        sales_staff_ids: List[int],
        roles: Optional[List[str]] = None
    ) -> List[User]:
        """Agents and team leaders created by any of the given sales staff"""
        if not sales_staff_ids:
            return []
        return db.query(User).filter(
            User.role.in_(roles or list(AGENT_ROLES)),
            User.created_by_id.in_(sales_staff_ids)
        ).order_by(User.full_name).all()

    @staticmethod
    def sales_staff_in_scope(db: Session, user: User) -> List[User]:
        if user.role == "Admin":
            return HierarchyService.all_sales_staff(db)
        if user.role == "Manager":
            return HierarchyService.sales_staff_of_manager(db, user.id)
        if user.role == "SalesStaff":
            return [user]
        return []

    @staticmethod
    def resolve_sales_staff_ids(
        db: Session,
        user: User,
        requested_id: Optional[int] = None
    ) -> List[int]:
        """
        Sales staff ids whose data the user may read.

        A sales staff always gets itself. Admin and Manager get every sales
        staff in scope, or just the requested one when it is in scope.
        """
        if user.role == "SalesStaff":
            return [user.id]

        scope_ids = [staff.id for staff in HierarchyService.sales_staff_in_scope(db, user)]
        if requested_id is None:
            return scope_ids

        if requested_id not in scope_ids:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Sales staff is outside your scope"
            )
        return [requested_id]

    @staticmethod
    def agents_in_scope(db: Session, user: User, requested_sales_staff_id: Optional[int] = None) -> List[User]:
        staff_ids = HierarchyService.resolve_sales_staff_ids(db, user, requested_sales_staff_id)
        return HierarchyService.agents_of_sales_staff(db, staff_ids)

    @staticmethod
    def sales_staff_of_agent(db: Session, agent: User) -> Optional[User]:
        if agent.created_by_id is None:
            return None
        creator = db.query(User).filter(User.id == agent.created_by_id).first()
        if creator is None or creator.role != "SalesStaff":
            return None
        return creator

    @staticmethod
    def is_in_scope(db: Session, user: User, target: User) -> bool:
        """Whether target is below user in the hierarchy"""
        if user.role == "Admin":
            return True
        if target.role == "SalesStaff":
            return user.role == "Manager" and target.created_by_id == user.id
        if target.role in AGENT_ROLES:
            staff_ids = HierarchyService.resolve_sales_staff_ids(db, user)
            return target.created_by_id in staff_ids
        return False
