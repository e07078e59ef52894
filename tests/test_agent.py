import asyncio
from datetime import date, datetime, timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from agency_portal.modules.agent.service import AgentService
from agency_portal.shared.database.models import AttendanceRecord, Client


def _client_payload(**overrides):
    payload = {
        "full_name": "John Prospect",
        "email": "John@Example.com",
        "phone": "555-0199",
        "insurance_type": "Health",
    }
    payload.update(overrides)
    return payload


def _check_in_today(db_session, agent):
    db_session.add(AttendanceRecord(agent_id=agent.id, check_in_time=datetime.now(), is_late=False))
    db_session.commit()


# ==================== ATTENDANCE ====================

def test_attendance_window(client, agent, timeframe, auth_headers):
    response = client.get("/api/v1/agent/attendance-window", headers=auth_headers(agent))
    assert response.status_code == 200
    body = response.json()
    assert body["start_time"] == "08:00"
    assert body["end_time"] == "09:30"
    assert body["sales_staff_name"] == "Samuel Sales"
    assert body["checked_in_today"] is False


def test_attendance_window_missing(client, agent, auth_headers):
    response = client.get("/api/v1/agent/attendance-window", headers=auth_headers(agent))
    assert response.status_code == 404
    assert response.json()["detail"] == "No attendance window found for this agent"


def test_check_in_once_per_day(client, agent, timeframe, auth_headers):
    response = client.post("/api/v1/agent/attendance", headers=auth_headers(agent))
    assert response.status_code == 201
    assert response.json()["agent_id"] == agent.id

    response = client.post("/api/v1/agent/attendance", headers=auth_headers(agent))
    assert response.status_code == 400
    assert response.json()["detail"] == "Already checked in today"

    response = client.get("/api/v1/agent/attendance-window", headers=auth_headers(agent))
    assert response.json()["checked_in_today"] is True


def test_check_in_lateness_is_computed(db_session, agent, timeframe):
    service = AgentService(db_session)
    day = date.today() - timedelta(days=3)

    on_time = asyncio.run(service.check_in(agent, now=datetime.combine(day, datetime.min.time()).replace(hour=9, minute=30)))
    assert on_time.is_late is False

    late = asyncio.run(service.check_in(agent, now=datetime.combine(day + timedelta(days=1), datetime.min.time()).replace(hour=9, minute=31)))
    assert late.is_late is True

    early = asyncio.run(service.check_in(agent, now=datetime.combine(day + timedelta(days=2), datetime.min.time()).replace(hour=7, minute=0)))
    assert early.is_late is False


def test_check_in_without_window_is_on_time(db_session, agent):
    service = AgentService(db_session)
    record = asyncio.run(service.check_in(agent, now=datetime.now().replace(hour=23, minute=59)))
    assert record.is_late is False


def test_attendance_is_unique_per_agent_and_day(db_session, agent):
    morning = datetime.now().replace(hour=8, minute=0)
    db_session.add(AttendanceRecord(agent_id=agent.id, check_in_time=morning, is_late=False))
    db_session.commit()

    db_session.add(AttendanceRecord(agent_id=agent.id, check_in_time=morning.replace(hour=10), is_late=True))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_concurrent_check_in_is_rejected(db_session, agent, monkeypatch):
    _check_in_today(db_session, agent)
    service = AgentService(db_session)
    # the other request's read ran before this row was committed
    monkeypatch.setattr(service.repository, "get_record_on", lambda agent_id, target_date: None)

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.check_in(agent))
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Already checked in today"
    assert db_session.query(AttendanceRecord).filter(AttendanceRecord.agent_id == agent.id).count() == 1


def test_attendance_history(client, db_session, agent, auth_headers):
    yesterday = datetime.now() - timedelta(days=1)
    db_session.add_all([
        AttendanceRecord(agent_id=agent.id, check_in_time=yesterday, is_late=True),
        AttendanceRecord(agent_id=agent.id, check_in_time=datetime.now(), is_late=False),
    ])
    db_session.commit()

    response = client.get("/api/v1/agent/attendance", headers=auth_headers(agent))
    assert len(response.json()) == 2

    response = client.get(
        f"/api/v1/agent/attendance?date={yesterday.date().isoformat()}",
        headers=auth_headers(agent),
    )
    records = response.json()
    assert len(records) == 1
    assert records[0]["is_late"] is True


# ==================== CLIENTS ====================

def test_adding_client_requires_check_in(client, agent, auth_headers):
    response = client.post("/api/v1/agent/clients", headers=auth_headers(agent), json=_client_payload())
    assert response.status_code == 403
    assert response.json()["detail"] == "You must check in for attendance before adding clients"


def test_add_client_after_check_in(client, db_session, agent, auth_headers):
    _check_in_today(db_session, agent)

    response = client.post("/api/v1/agent/clients", headers=auth_headers(agent), json=_client_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["agent_id"] == agent.id
    assert body["email"] == "john@example.com"
    assert body["interaction_time"] is not None

    response = client.get("/api/v1/agent/clients", headers=auth_headers(agent))
    assert [c["full_name"] for c in response.json()] == ["John Prospect"]


def test_follow_up_date_required(client, db_session, agent, auth_headers):
    _check_in_today(db_session, agent)

    response = client.post(
        "/api/v1/agent/clients",
        headers=auth_headers(agent),
        json=_client_payload(requires_follow_up=True),
    )
    assert response.status_code == 400

    follow_up = (datetime.now() + timedelta(days=7)).isoformat()
    response = client.post(
        "/api/v1/agent/clients",
        headers=auth_headers(agent),
        json=_client_payload(requires_follow_up=True, follow_up_date=follow_up),
    )
    assert response.status_code == 201
    assert response.json()["requires_follow_up"] is True


def test_update_own_client_only(client, db_session, agent, team_leader, auth_headers):
    own = Client(
        agent_id=agent.id, full_name="Own Client", phone="555-0101",
        insurance_type="Auto", interaction_time=datetime.now(),
    )
    db_session.add(own)
    db_session.commit()

    response = client.patch(
        f"/api/v1/agent/clients/{own.id}",
        headers=auth_headers(agent),
        json={"policy_details": "Full coverage, 12 months"},
    )
    assert response.status_code == 200
    assert response.json()["policy_details"] == "Full coverage, 12 months"

    response = client.patch(
        f"/api/v1/agent/clients/{own.id}",
        headers=auth_headers(team_leader),
        json={"policy_details": "Changed"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


def test_update_client_follow_up_needs_date(client, db_session, agent, auth_headers):
    own = Client(
        agent_id=agent.id, full_name="Own Client", phone="555-0101",
        insurance_type="Auto", interaction_time=datetime.now(),
    )
    db_session.add(own)
    db_session.commit()

    response = client.patch(
        f"/api/v1/agent/clients/{own.id}",
        headers=auth_headers(agent),
        json={"requires_follow_up": True},
    )
    assert response.status_code == 400

    db_session.refresh(own)
    assert own.requires_follow_up is False


def test_update_client_null_required_field_is_ignored(client, db_session, agent, auth_headers):
    own = Client(
        agent_id=agent.id, full_name="Own Client", phone="555-0101",
        insurance_type="Auto", policy_details="Basic cover", interaction_time=datetime.now(),
    )
    db_session.add(own)
    db_session.commit()

    response = client.patch(
        f"/api/v1/agent/clients/{own.id}",
        headers=auth_headers(agent),
        json={"full_name": None, "phone": None, "policy_details": None},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Own Client"
    assert body["phone"] == "555-0101"
    assert body["policy_details"] is None


# ==================== PERFORMANCE ====================

def test_performance_weekly(client, db_session, agent, auth_headers):
    now = datetime.now()
    db_session.add_all([
        AttendanceRecord(agent_id=agent.id, check_in_time=now - timedelta(days=1), is_late=False),
        AttendanceRecord(agent_id=agent.id, check_in_time=now - timedelta(days=2), is_late=True),
        AttendanceRecord(agent_id=agent.id, check_in_time=now - timedelta(days=3), is_late=True, is_excused=True),
        AttendanceRecord(agent_id=agent.id, check_in_time=now - timedelta(days=4), is_late=True),
        AttendanceRecord(agent_id=agent.id, check_in_time=now - timedelta(days=20), is_late=False),
        Client(agent_id=agent.id, full_name="Recent", phone="555-0101",
               insurance_type="Auto", interaction_time=now - timedelta(days=2)),
        Client(agent_id=agent.id, full_name="Old", phone="555-0102",
               insurance_type="Auto", interaction_time=now - timedelta(days=30)),
    ])
    db_session.commit()

    response = client.get("/api/v1/agent/performance/weekly", headers=auth_headers(agent))

    assert response.status_code == 200
    body = response.json()
    assert body["period"] == "weekly"
    assert body["clients_added"] == 1
    assert body["attendance_rate"] == 50.0
    assert [c["full_name"] for c in body["clients"]] == ["Recent"]


def test_performance_invalid_period(client, agent, auth_headers):
    response = client.get("/api/v1/agent/performance/yearly", headers=auth_headers(agent))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid period"


# ==================== REPORTS ====================

def test_agent_reports(client, agent, auth_headers):
    response = client.post(
        "/api/v1/agent/reports",
        headers=auth_headers(agent),
        json={"title": "Daily wrap-up", "report_type": "daily", "content": "Met three prospects"},
    )
    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    assert response.json()["is_aggregated"] is False

    response = client.get("/api/v1/agent/reports", headers=auth_headers(agent))
    assert [r["title"] for r in response.json()] == ["Daily wrap-up"]
