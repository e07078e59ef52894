from conftest import PASSWORD

from agency_portal.core.auth.service import AuthService


def _login(client, user, password=PASSWORD, work_id=None):
    return client.post(
        "/api/v1/auth/login",
        json={"email": user.email, "password": password, "work_id": work_id or user.work_id},
    )


def test_login_returns_token_and_user(client, agent):
    response = _login(client, agent)

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["work_id"] == "AGT001"
    assert "password_hash" not in body["user"]

    payload = AuthService.verify_token(body["access_token"])
    assert payload["user_id"] == agent.id
    assert payload["role"] == "Agent"


def test_login_is_case_insensitive_on_email(client, agent):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": agent.email.upper(), "password": PASSWORD, "work_id": agent.work_id},
    )
    assert response.status_code == 200


def test_login_with_wrong_work_id(client, agent):
    response = _login(client, agent, work_id="AGT999")
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found or incorrect work ID"


def test_login_with_unknown_email(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": PASSWORD, "work_id": "NOPE1"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found or incorrect work ID"


def test_login_with_wrong_password(client, agent):
    response = _login(client, agent, password="wrong-password")
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect password"


def test_login_deactivated_user(client, make_user):
    user = make_user("AGT050", "Agent", is_active=False)
    response = _login(client, user)
    assert response.status_code == 401
    assert response.json()["detail"] == "User account has been deactivated"


def test_login_validation_errors_are_400(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "not-an-email", "password": "123", "work_id": "A"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation error"
    paths = {error["path"] for error in body["errors"]}
    assert {"email", "password", "work_id"} <= paths


def test_me_requires_token(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_me_rejects_garbage_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_me_returns_current_user(client, manager, auth_headers):
    response = client.get("/api/v1/auth/me", headers=auth_headers(manager))
    assert response.status_code == 200
    assert response.json()["role"] == "Manager"


def test_token_of_deactivated_user_is_rejected(client, db_session, agent, auth_headers):
    headers = auth_headers(agent)
    agent.is_active = False
    db_session.commit()

    response = client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "User account has been deactivated"


def test_logout(client, agent, auth_headers):
    response = client.post("/api/v1/auth/logout", headers=auth_headers(agent))
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}


def test_change_password(client, db_session, agent, auth_headers):
    response = client.post(
        "/api/v1/auth/change-password",
        headers=auth_headers(agent),
        json={
            "current_password": PASSWORD,
            "new_password": "brand-new-pass",
            "confirm_password": "brand-new-pass",
        },
    )
    assert response.status_code == 200

    db_session.refresh(agent)
    assert AuthService.verify_password("brand-new-pass", agent.password_hash)
    assert _login(client, agent, password="brand-new-pass").status_code == 200


def test_change_password_rejects_wrong_current(client, agent, auth_headers):
    response = client.post(
        "/api/v1/auth/change-password",
        headers=auth_headers(agent),
        json={
            "current_password": "not-my-password",
            "new_password": "brand-new-pass",
            "confirm_password": "brand-new-pass",
        },
    )
    assert response.status_code == 400


def test_change_password_rejects_mismatch(client, agent, auth_headers):
    response = client.post(
        "/api/v1/auth/change-password",
        headers=auth_headers(agent),
        json={
            "current_password": PASSWORD,
            "new_password": "brand-new-pass",
            "confirm_password": "other-new-pass",
        },
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "New passwords do not match"
