from datetime import datetime, timedelta

from agency_portal.shared.database.models import (
    AttendanceRecord, Client, Message, PerformanceMetric, Report, User
)


def _client(agent_id, when, name="Jane Client"):
    return Client(
        agent_id=agent_id,
        full_name=name,
        phone="555-0100",
        insurance_type="Life",
        interaction_time=when,
    )


def _report(user, title="Weekly summary", report_type="weekly"):
    now = datetime.now()
    return Report(
        submitted_by_id=user.id,
        title=title,
        report_type=report_type,
        content="Numbers and notes",
        created_at=now,
        updated_at=now,
    )


# ==================== SALES STAFF ====================

def test_create_sales_staff(client, db_session, manager, auth_headers):
    response = client.post(
        "/api/v1/manager/sales-staff",
        headers=auth_headers(manager),
        json={"work_id": "SLF100", "email": "sales100@example.com", "full_name": "Sam Seller", "password": "sales123"},
    )
    assert response.status_code == 201
    assert response.json()["role"] == "SalesStaff"

    created = db_session.query(User).filter(User.work_id == "SLF100").one()
    assert created.created_by_id == manager.id


def test_sales_staff_listing_is_scoped(client, admin, manager, sales_staff, other_sales_staff, auth_headers):
    response = client.get("/api/v1/manager/sales-staff", headers=auth_headers(manager))
    assert [s["work_id"] for s in response.json()] == ["SLF001"]

    response = client.get("/api/v1/manager/sales-staff", headers=auth_headers(admin))
    assert {s["work_id"] for s in response.json()} == {"SLF001", "SLF002"}


def test_update_sales_staff_outside_scope(client, manager, other_sales_staff, auth_headers):
    response = client.patch(
        f"/api/v1/manager/sales-staff/{other_sales_staff.id}",
        headers=auth_headers(manager),
        json={"full_name": "Hijacked"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Sales staff not found"


def test_update_sales_staff(client, manager, sales_staff, auth_headers):
    response = client.patch(
        f"/api/v1/manager/sales-staff/{sales_staff.id}",
        headers=auth_headers(manager),
        json={"is_active": False},
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False


def test_sales_staff_agents(client, manager, sales_staff, agent, team_leader, auth_headers):
    response = client.get(f"/api/v1/manager/sales-staff/{sales_staff.id}/agents", headers=auth_headers(manager))
    assert response.status_code == 200
    assert {a["work_id"] for a in response.json()} == {"AGT001", "AGT002"}


# ==================== AGENTS ====================

def test_agents_overview(client, db_session, manager, sales_staff, agent, team_leader, auth_headers):
    now = datetime.now()
    db_session.add_all([
        AttendanceRecord(agent_id=agent.id, check_in_time=now, is_late=False),
        _client(agent.id, now),
    ])
    db_session.commit()

    response = client.get("/api/v1/manager/agents", headers=auth_headers(manager))

    assert response.status_code == 200
    by_work_id = {a["work_id"]: a for a in response.json()}
    assert by_work_id["AGT001"]["attendance_status"] == "Present"
    assert by_work_id["AGT001"]["clients_added_today"] == 1
    assert by_work_id["AGT001"]["sales_staff_name"] == "Samuel Sales"
    assert by_work_id["AGT002"]["attendance_status"] == "Absent"
    assert by_work_id["AGT002"]["clients_added_today"] == 0


def test_agents_overview_rejects_foreign_sales_staff(client, manager, other_sales_staff, auth_headers):
    response = client.get(
        f"/api/v1/manager/agents?sales_staff_id={other_sales_staff.id}",
        headers=auth_headers(manager),
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Sales staff is outside your scope"


def test_agent_profile(client, db_session, manager, agent, auth_headers):
    yesterday = datetime.now() - timedelta(days=1)
    db_session.add_all([
        AttendanceRecord(agent_id=agent.id, check_in_time=yesterday, is_late=False),
        _client(agent.id, yesterday),
    ])
    db_session.commit()

    response = client.get(f"/api/v1/manager/agents/{agent.id}", headers=auth_headers(manager))

    assert response.status_code == 200
    body = response.json()
    assert body["agent"]["work_id"] == "AGT001"
    assert body["sales_staff"]["work_id"] == "SLF001"
    assert body["performance"]["period"] == "monthly"
    assert body["performance"]["clients_added"] == 1
    assert body["performance"]["attendance_rate"] == 100.0
    assert body["performance"]["performance_score"] == 46
    assert len(body["recent_clients"]) == 1


def test_agent_profile_outside_scope(client, make_user, manager, other_sales_staff, auth_headers):
    foreign_agent = make_user("AGT900", "Agent", created_by=other_sales_staff)
    response = client.get(f"/api/v1/manager/agents/{foreign_agent.id}", headers=auth_headers(manager))
    assert response.status_code == 404


def test_update_agent_status(client, manager, agent, auth_headers):
    response = client.patch(
        f"/api/v1/manager/agents/{agent.id}/status",
        headers=auth_headers(manager),
        json={"is_active": False},
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False


# ==================== ATTENDANCE ====================

def test_attendance_includes_sales_staff_name(client, db_session, manager, agent, make_user, other_sales_staff, auth_headers):
    foreign_agent = make_user("AGT900", "Agent", created_by=other_sales_staff)
    now = datetime.now()
    db_session.add_all([
        AttendanceRecord(agent_id=agent.id, check_in_time=now, is_late=True),
        AttendanceRecord(agent_id=foreign_agent.id, check_in_time=now, is_late=False),
    ])
    db_session.commit()

    response = client.get(
        f"/api/v1/manager/attendance?date={now.date().isoformat()}",
        headers=auth_headers(manager),
    )

    assert response.status_code == 200
    records = response.json()
    assert len(records) == 1
    assert records[0]["agent_name"] == "Alice Agent"
    assert records[0]["sales_staff_name"] == "Samuel Sales"
    assert records[0]["is_late"] is True


# ==================== REPORTS ====================

def test_create_and_list_own_reports(client, manager, auth_headers):
    response = client.post(
        "/api/v1/manager/reports",
        headers=auth_headers(manager),
        json={"title": "Monthly overview", "report_type": "monthly", "content": "All good"},
    )
    assert response.status_code == 201
    assert response.json()["status"] == "pending"

    response = client.get("/api/v1/manager/reports", headers=auth_headers(manager))
    assert [r["title"] for r in response.json()] == ["Monthly overview"]


def test_invalid_report_type_is_rejected(client, manager, auth_headers):
    response = client.post(
        "/api/v1/manager/reports",
        headers=auth_headers(manager),
        json={"title": "Quarterly", "report_type": "quarterly", "content": "Nope"},
    )
    assert response.status_code == 400


def test_sales_staff_and_agent_reports(client, db_session, manager, sales_staff, agent, auth_headers):
    db_session.add_all([_report(sales_staff, "Staff report"), _report(agent, "Agent report", "daily")])
    db_session.commit()

    response = client.get("/api/v1/manager/sales-staff-reports", headers=auth_headers(manager))
    assert [r["title"] for r in response.json()] == ["Staff report"]
    assert response.json()[0]["submitted_by_name"] == "Samuel Sales"

    response = client.get("/api/v1/manager/agent-reports", headers=auth_headers(manager))
    assert [r["title"] for r in response.json()] == ["Agent report"]


def test_review_sales_staff_report_sends_feedback(client, db_session, manager, sales_staff, auth_headers):
    report = _report(sales_staff)
    db_session.add(report)
    db_session.commit()

    response = client.patch(
        f"/api/v1/manager/reports/{report.id}/review",
        headers=auth_headers(manager),
        json={"status": "approved", "feedback": "Great week"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "approved"
    assert body["reviewed_by_id"] == manager.id
    assert body["feedback"] == "Great week"

    message = db_session.query(Message).one()
    assert message.message_type == "report_feedback"
    assert message.sender_id == manager.id
    assert message.receiver_id == sales_staff.id
    assert message.related_report_id == report.id
    assert "Great week" in message.content


def test_review_rejects_agent_reports(client, db_session, manager, agent, auth_headers):
    report = _report(agent)
    db_session.add(report)
    db_session.commit()

    response = client.patch(
        f"/api/v1/manager/reports/{report.id}/review",
        headers=auth_headers(manager),
        json={"status": "approved"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Report not found"


def test_review_cannot_set_pending(client, db_session, manager, sales_staff, auth_headers):
    report = _report(sales_staff)
    db_session.add(report)
    db_session.commit()

    response = client.patch(
        f"/api/v1/manager/reports/{report.id}/review",
        headers=auth_headers(manager),
        json={"status": "pending"},
    )
    assert response.status_code == 400


# ==================== PERFORMANCE ====================

def test_performance_metrics_snapshot_and_trend(client, db_session, manager, agent, team_leader, auth_headers):
    yesterday = datetime.now() - timedelta(days=1)
    db_session.add_all([
        AttendanceRecord(agent_id=agent.id, check_in_time=yesterday, is_late=False),
        _client(agent.id, yesterday),
    ])
    db_session.commit()

    response = client.get("/api/v1/manager/performance-metrics", headers=auth_headers(manager))

    assert response.status_code == 200
    metrics = response.json()
    assert [m["work_id"] for m in metrics] == ["AGT001", "AGT002"]
    assert metrics[0]["period"] == "monthly"
    assert metrics[0]["performance_score"] == 46
    assert metrics[0]["performance_trend"] == 0

    db_session.add(_client(agent.id, yesterday, name="Second Client"))
    db_session.commit()

    response = client.get("/api/v1/manager/performance-metrics", headers=auth_headers(manager))
    first = response.json()[0]
    assert first["performance_score"] == 52
    assert first["performance_trend"] == 6

    assert db_session.query(PerformanceMetric).filter(PerformanceMetric.user_id == agent.id).count() == 1


def test_performance_metrics_invalid_period(client, manager, auth_headers):
    response = client.get("/api/v1/manager/performance-metrics?period=yearly", headers=auth_headers(manager))
    assert response.status_code == 400
