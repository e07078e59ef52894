from datetime import datetime

from agency_portal.shared.database.models import AgentGroup, Report


def _report(user, title, report_type="daily"):
    now = datetime.now()
    return Report(
        submitted_by_id=user.id,
        title=title,
        report_type=report_type,
        content="Details",
        created_at=now,
        updated_at=now,
    )


def test_groups_led_by_caller(client, team_leader, group, auth_headers):
    response = client.get("/api/v1/team-leader/groups", headers=auth_headers(team_leader))
    assert response.status_code == 200
    assert response.json() == [{
        "id": group.id,
        "name": "Tom Leader's Group",
        "sales_staff_id": group.sales_staff_id,
        "member_count": 1,
    }]


def test_group_members(client, team_leader, group, auth_headers):
    response = client.get(f"/api/v1/team-leader/groups/{group.id}/members", headers=auth_headers(team_leader))
    assert [m["work_id"] for m in response.json()] == ["AGT001"]


def test_group_of_another_leader_is_hidden(client, db_session, make_user, sales_staff, group, auth_headers):
    other_leader = make_user("AGT010", "TeamLeader", created_by=sales_staff)
    response = client.get(f"/api/v1/team-leader/groups/{group.id}/members", headers=auth_headers(other_leader))
    assert response.status_code == 404
    assert response.json()["detail"] == "Agent group not found"


def test_team_leader_routes_reject_agents(client, agent, group, auth_headers):
    response = client.get("/api/v1/team-leader/groups", headers=auth_headers(agent))
    assert response.status_code == 403


def test_group_reports_by_type(client, db_session, team_leader, agent, make_user, sales_staff, group, auth_headers):
    outsider = make_user("AGT011", "Agent", created_by=sales_staff)
    db_session.add_all([
        _report(agent, "Member daily"),
        _report(agent, "Member weekly", report_type="weekly"),
        _report(outsider, "Outsider daily"),
    ])
    db_session.commit()

    response = client.get(
        f"/api/v1/team-leader/groups/{group.id}/reports/daily",
        headers=auth_headers(team_leader),
    )
    assert response.status_code == 200
    assert [r["title"] for r in response.json()] == ["Member daily"]


def test_group_reports_invalid_type(client, team_leader, group, auth_headers):
    response = client.get(
        f"/api/v1/team-leader/groups/{group.id}/reports/yearly",
        headers=auth_headers(team_leader),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid report type"


def test_aggregate_reports(client, db_session, team_leader, agent, group, auth_headers):
    first = _report(agent, "Monday")
    second = _report(agent, "Tuesday")
    db_session.add_all([first, second])
    db_session.commit()

    response = client.post(
        f"/api/v1/team-leader/groups/{group.id}/reports/aggregate",
        headers=auth_headers(team_leader),
        json={
            "title": "Group week",
            "report_type": "weekly",
            "content": "Two solid days",
            "report_ids": [first.id, second.id],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["is_aggregated"] is True
    assert body["submitted_by_id"] == team_leader.id
    assert body["child_report_ids"] == sorted([first.id, second.id])

    db_session.refresh(first)
    db_session.refresh(second)
    assert first.parent_report_id == body["id"]
    assert second.parent_report_id == body["id"]


def test_aggregate_rejects_reports_from_outside_group(client, db_session, team_leader, make_user, sales_staff, group, auth_headers):
    outsider = make_user("AGT011", "Agent", created_by=sales_staff)
    report = _report(outsider, "Not a member")
    db_session.add(report)
    db_session.commit()

    response = client.post(
        f"/api/v1/team-leader/groups/{group.id}/reports/aggregate",
        headers=auth_headers(team_leader),
        json={"title": "Group week", "report_type": "weekly", "content": "Mixed", "report_ids": [report.id]},
    )
    assert response.status_code == 400

    db_session.refresh(report)
    assert report.parent_report_id is None
    assert db_session.query(Report).filter(Report.is_aggregated == True).count() == 0  # noqa: E712


def test_aggregate_rejects_already_aggregated_report(client, db_session, team_leader, agent, group, auth_headers):
    report = _report(agent, "Monday")
    db_session.add(report)
    db_session.commit()

    url = f"/api/v1/team-leader/groups/{group.id}/reports/aggregate"
    payload = {"title": "Group week", "report_type": "weekly", "content": "First pass", "report_ids": [report.id]}
    first = client.post(url, headers=auth_headers(team_leader), json=payload)
    assert first.status_code == 201

    response = client.post(url, headers=auth_headers(team_leader), json={**payload, "content": "Second pass"})
    assert response.status_code == 400
    assert response.json()["detail"] == f"Report {report.id} is already part of aggregated report {first.json()['id']}"

    db_session.refresh(report)
    assert report.parent_report_id == first.json()["id"]
    assert db_session.query(Report).filter(Report.is_aggregated == True).count() == 1  # noqa: E712


def test_aggregate_without_children(client, team_leader, group, auth_headers):
    response = client.post(
        f"/api/v1/team-leader/groups/{group.id}/reports/aggregate",
        headers=auth_headers(team_leader),
        json={"title": "Quiet week", "report_type": "weekly", "content": "Nothing to merge"},
    )
    assert response.status_code == 201
    assert response.json()["child_report_ids"] == []
