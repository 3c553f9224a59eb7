from datetime import timedelta

from sqlalchemy import select

from eventplanner.core.security import create_access, create_token, verify_password
from eventplanner.models.users import User


def test_register_creates_user_with_hashed_password(client, db_session):
    response = client.post(
        "/auth/register",
        json={"email": "new.user@example.com", "password": "hunter22"},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["message"] == "User registered successfully"
    assert payload["user"]["email"] == "new.user@example.com"
    assert "password_hash" not in payload["user"]

    stored = db_session.execute(
        select(User).where(User.email == "new.user@example.com")
    ).scalar_one()
    assert stored.password_hash != "hunter22"
    assert verify_password("hunter22", stored.password_hash)


def test_register_duplicate_email_conflicts(client, test_user):
    response = client.post(
        "/auth/register",
        json={"email": test_user.email, "password": "another1"},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "User with this email already exists"


def test_register_rejects_short_password(client):
    response = client.post(
        "/auth/register",
        json={"email": "short@example.com", "password": "abc"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert [err["field"] for err in body["errors"]] == ["password"]


def test_register_rejects_invalid_email(client):
    response = client.post(
        "/auth/register",
        json={"email": "not-an-email", "password": "hunter22"},
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_login_returns_token_and_sets_cookie(client, test_user):
    response = client.post(
        "/auth/login",
        json={"email": test_user.email, "password": "secret123"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Login successful"
    assert payload["user"]["id"] == test_user.id
    assert response.cookies.get("access_token") == payload["token"]
    assert response.headers["Cache-Control"] == "no-store"

    me = client.get(
        "/auth/me",
        headers={"Authorization": f"Bearer {payload['token']}"},
    )
    assert me.status_code == 200
    assert me.json()["user"]["email"] == test_user.email


def test_login_with_wrong_password_is_rejected(client, test_user):
    response = client.post(
        "/auth/login",
        json={"email": test_user.email, "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_with_unknown_email_is_rejected(client):
    response = client.post(
        "/auth/login",
        json={"email": "nobody@example.com", "password": "secret123"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_me_uses_cookie_session(auth_client):
    client, user = auth_client

    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user.id


def test_me_requires_authentication(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_expired_token_reports_session_expired(client, test_user):
    token = create_token(str(test_user.id), test_user.email, timedelta(minutes=-5))

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Session expired"


def test_malformed_token_is_rejected(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_token_for_missing_user_is_rejected(client):
    token = create_access("999999", "ghost@example.com")

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_non_bearer_authorization_header_is_rejected(client):
    response = client.get("/auth/me", headers={"Authorization": "Basic abc123"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid authorization header"


def test_bearer_header_takes_precedence_over_cookie(auth_client, other_user, headers_for):
    client, _ = auth_client

    response = client.get("/auth/me", headers=headers_for(other_user))

    assert response.json()["user"]["id"] == other_user.id


def test_logout_clears_cookie(auth_client):
    client, _ = auth_client

    response = client.post("/auth/logout")

    assert response.status_code == 200
    assert 'access_token=""' in response.headers["set-cookie"]
