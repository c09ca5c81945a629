"""Authentication endpoint tests."""
import uuid
from datetime import timedelta

from airops.security import create_access_token


def test_health_is_public(client) -> None:
    response = client.get("/api/health")
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["status"] == "OK"


def test_request_id_is_echoed(client) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "trace-42"})

    assert response.headers["x-request-id"] == "trace-42"


def test_unknown_endpoint_uses_envelope(client) -> None:
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "API endpoint not found"}


def test_missing_token_is_rejected(client) -> None:
    response = client.get("/api/flights")

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. No token provided."


def test_invalid_token_is_rejected(client) -> None:
    response = client.get("/api/flights", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. Invalid token."


def test_expired_token_is_rejected(client) -> None:
    token = create_access_token("user-1", "a@example.com", "admin", "sid-1", expires_delta=timedelta(minutes=-5))
    response = client.get("/api/flights", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. Token expired."


def test_token_for_unknown_user_is_rejected(client) -> None:
    token = create_access_token(str(uuid.uuid4()), "ghost@example.com", "admin", "sid-2")
    response = client.get("/api/flights", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. User not found or inactive."


def test_register_rejects_duplicate_email(client, admin_email) -> None:
    response = client.post("/api/auth/register", json={
        "firstName": "Other",
        "lastName": "Admin",
        "email": admin_email.upper(),
        "dateOfBirth": "1988-02-02",
        "password": "Secret123",
    })

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email already exists"


def test_register_validation_errors(client) -> None:
    response = client.post("/api/auth/register", json={
        "firstName": "A",
        "lastName": "Admin",
        "email": "not-an-email",
        "dateOfBirth": "2090-01-01",
        "password": "123",
    })
    body = response.json()

    assert response.status_code == 400
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert any(error.startswith("firstName:") for error in body["errors"])
    assert any("Please enter a valid email" in error for error in body["errors"])
    assert any("Date of birth must be in the past" in error for error in body["errors"])


def test_register_enforces_password_name_and_age_rules(client) -> None:
    response = client.post("/api/auth/register", json={
        "firstName": "R2D2",
        "lastName": "Admin",
        "email": "rules@example.com",
        "dateOfBirth": "2015-01-01",
        "password": "alllowercase",
    })
    errors = response.json()["errors"]

    assert response.status_code == 400
    assert "firstName: can only contain letters and spaces" in errors
    assert any("one uppercase letter, one lowercase letter, and one number" in error for error in errors)
    assert "dateOfBirth: Age must be between 18 and 100 years" in errors


def test_login_returns_token_and_user(client, admin_email, login_as) -> None:
    response = login_as(admin_email)
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["token"]
    assert data["user"]["email"] == admin_email
    assert data["user"]["role"] == "admin"
    assert data["user"]["fullName"] == "Test Admin"


def test_wrong_password_is_generic(client, admin_email, login_as) -> None:
    response = login_as(admin_email, "wrong-password")

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_repeated_failures_lock_out_email(client, login_as) -> None:
    email = f"lockout-{uuid.uuid4().hex[:8]}@example.com"
    for _ in range(5):
        assert login_as(email, "nope").status_code == 401

    response = login_as(email, "nope")

    assert response.status_code == 429
    assert response.json()["message"] == "Too many failed login attempts. Please try again later."


def test_failed_attempts_are_recorded(client, auth_headers, login_as) -> None:
    email = f"unknown-{uuid.uuid4().hex[:8]}@example.com"
    login_as(email, "nope")

    response = client.get("/api/auth/activity", params={"limit": 200}, headers=auth_headers)
    activities = [a for a in response.json()["data"]["activities"] if a["email"] == email]

    assert response.status_code == 200
    assert len(activities) == 1
    assert activities[0]["success"] is False
    assert activities[0]["failureReason"] == "Invalid Email"
    assert activities[0]["user"] is None


def test_logout_closes_session(client, new_admin, login_as) -> None:
    email = new_admin()
    token = login_as(email).json()["data"]["token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"

    activity = client.get("/api/auth/activity", params={"limit": 200}, headers=headers).json()["data"]
    sessions = [a for a in activity["activities"] if a["email"] == email and a["success"]]
    assert sessions[0]["logoutTime"] is not None
    assert sessions[0]["user"]["email"] == email


def test_profile_update_and_password_change(client, auth_headers, login_as) -> None:
    email = f"profile-{uuid.uuid4().hex[:8]}@example.com"
    user_id = client.post("/api/auth/register", json={
        "firstName": "Nadia",
        "lastName": "Rahman",
        "email": email,
        "dateOfBirth": "1992-09-12",
        "password": "FirstPass1",
    }).json()["data"]["id"]
    token = login_as(email, "FirstPass1").json()["data"]["token"]
    own_headers = {"Authorization": f"Bearer {token}"}

    profile = client.get(f"/api/auth/profile/{user_id}", headers=auth_headers).json()["data"]
    assert profile["fullName"] == "Nadia Rahman"
    assert "passwordHash" not in profile

    updated = client.put(f"/api/auth/profile/{user_id}", json={"lastName": "Karim"}, headers=own_headers)
    assert updated.json()["data"]["lastName"] == "Karim"

    wrong = client.put(f"/api/auth/change-password/{user_id}", json={
        "currentPassword": "not-it",
        "newPassword": "SecondPass2",
    }, headers=own_headers)
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    changed = client.put(f"/api/auth/change-password/{user_id}", json={
        "currentPassword": "FirstPass1",
        "newPassword": "SecondPass2",
    }, headers=own_headers)
    assert changed.status_code == 200
    assert login_as(email, "SecondPass2").status_code == 200


def test_admin_cannot_edit_another_admin(client, auth_headers, new_admin, login_as) -> None:
    other_email = new_admin()
    other_id = login_as(other_email).json()["data"]["user"]["id"]

    profile = client.put(f"/api/auth/profile/{other_id}", json={"lastName": "Hijacked"}, headers=auth_headers)
    password = client.put(f"/api/auth/change-password/{other_id}", json={
        "currentPassword": "Secret123",
        "newPassword": "Takeover99",
    }, headers=auth_headers)

    assert profile.status_code == 403
    assert profile.json()["message"] == "Access denied. You can only modify your own account."
    assert password.status_code == 403
    assert login_as(other_email).status_code == 200


def test_super_admin_can_edit_any_profile(client, new_admin, login_as, promote_to_super_admin) -> None:
    super_email = new_admin()
    promote_to_super_admin(super_email)
    token = login_as(super_email).json()["data"]["token"]
    other_id = login_as(new_admin()).json()["data"]["user"]["id"]

    response = client.put(
        f"/api/auth/profile/{other_id}",
        json={"lastName": "Updated"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["lastName"] == "Updated"


def test_unknown_profile_is_not_found(client, auth_headers) -> None:
    response = client.get(f"/api/auth/profile/{uuid.uuid4()}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"
