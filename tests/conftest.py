import os

# Settings read DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agency_portal.config.database import get_db
from agency_portal.core.auth.service import AuthService
from agency_portal.main import app
from agency_portal.shared.database.models import (
    AgentGroup, AgentGroupMember, AttendanceTimeframe, Base, User
)

PASSWORD = "secret123"
PASSWORD_HASH = AuthService.get_password_hash(PASSWORD)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session):
    def _make_user(work_id, role, created_by=None, is_active=True, full_name=None):
        user = User(
            work_id=work_id,
            email=f"{work_id.lower()}@example.com",
            full_name=full_name or f"{role} {work_id}",
            password_hash=PASSWORD_HASH,
            role=role,
            created_by_id=created_by.id if created_by else None,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def auth_headers():
    def _auth_headers(user):
        token = AuthService.create_access_token(
            data={"user_id": user.id, "email": user.email, "role": user.role, "work_id": user.work_id}
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def admin(make_user):
    return make_user("ADM001", "Admin", full_name="Ada Admin")


@pytest.fixture()
def manager(make_user, admin):
    return make_user("MGR001", "Manager", created_by=admin, full_name="Maria Manager")


@pytest.fixture()
def sales_staff(make_user, manager):
    return make_user("SLF001", "SalesStaff", created_by=manager, full_name="Samuel Sales")


@pytest.fixture()
def agent(make_user, sales_staff):
    return make_user("AGT001", "Agent", created_by=sales_staff, full_name="Alice Agent")


@pytest.fixture()
def team_leader(make_user, sales_staff):
    return make_user("AGT002", "TeamLeader", created_by=sales_staff, full_name="Tom Leader")


@pytest.fixture()
def other_sales_staff(make_user, admin):
    """Sales staff under a different manager"""
    other_manager = make_user("MGR002", "Manager", created_by=admin, full_name="Otto Manager")
    return make_user("SLF002", "SalesStaff", created_by=other_manager, full_name="Olga Sales")


@pytest.fixture()
def timeframe(db_session, sales_staff):
    timeframe = AttendanceTimeframe(sales_staff_id=sales_staff.id, start_time="08:00", end_time="09:30")
    db_session.add(timeframe)
    db_session.commit()
    db_session.refresh(timeframe)
    return timeframe


@pytest.fixture()
def group(db_session, sales_staff, team_leader, agent):
    """Team leader group with the agent as member"""
    group = AgentGroup(
        sales_staff_id=sales_staff.id,
        team_leader_id=team_leader.id,
        name=f"{team_leader.full_name}'s Group",
    )
    db_session.add(group)
    db_session.flush()
    db_session.add(AgentGroupMember(group_id=group.id, agent_id=agent.id))
    db_session.commit()
    db_session.refresh(group)
    return group
