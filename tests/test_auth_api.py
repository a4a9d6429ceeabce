import pytest
from jose import jwt

from conftest import DOCTOR_PASSWORD
from prescweb.core.config import get_settings
from prescweb.core.security import ALGORITHM, InvalidSessionError, create_session_token, read_session_token

COOKIE = get_settings().session_cookie_name


def test_register_starts_a_session(client):
    response = client.post(
        "/api/register",
        json={"username": "drsalma", "password": "pass1234", "fullName": "Salma Khatun", "email": "salma@prescweb.org"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["doctor"]["username"] == "drsalma"
    assert body["doctor"]["fullName"] == "Salma Khatun"
    assert body["tokenType"] == "bearer"
    assert "hashedPassword" not in body["doctor"]
    assert client.cookies.get(COOKIE)

    me = client.get("/api/me")
    assert me.status_code == 200
    assert me.json()["username"] == "drsalma"


def test_register_duplicate_username_is_409(client, doctor):
    response = client.post(
        "/api/register",
        json={"username": doctor.username, "password": "pass1234", "fullName": "Someone Else"},
    )
    assert response.status_code == 409


def test_register_validates_input(client):
    response = client.post("/api/register", json={"username": "dr", "password": "123", "fullName": "X"})
    assert response.status_code == 422


def test_login_sets_cookie(client, doctor):
    response = client.post("/api/login", json={"username": doctor.username, "password": DOCTOR_PASSWORD})

    assert response.status_code == 200
    assert response.json()["message"] == "Login successful"
    assert client.cookies.get(COOKIE)
    assert client.get("/api/me").json()["id"] == doctor.id


def test_login_with_wrong_password_is_401(client, doctor):
    response = client.post("/api/login", json={"username": doctor.username, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid username or password"


def test_login_unknown_user_is_401(client):
    response = client.post("/api/login", json={"username": "nobody", "password": "whatever"})
    assert response.status_code == 401


def test_bearer_token_from_login_is_accepted(client, doctor):
    token = client.post(
        "/api/login", json={"username": doctor.username, "password": DOCTOR_PASSWORD}
    ).json()["accessToken"]
    client.cookies.clear()

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_logout_ends_session(client, doctor):
    client.post("/api/login", json={"username": doctor.username, "password": DOCTOR_PASSWORD})

    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/me").status_code == 401


def test_me_without_session_is_401(client):
    assert client.get("/api/me").status_code == 401


def test_expired_session_is_401(client, doctor):
    token = create_session_token(doctor.id, expires_minutes=-1)

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Session has expired. Please log in again."


def test_read_session_token_rejects_foreign_tokens():
    foreign = jwt.encode({"sub": "1"}, "test-secret-key", algorithm=ALGORITHM)

    with pytest.raises(InvalidSessionError):
        read_session_token(foreign)
    with pytest.raises(InvalidSessionError):
        read_session_token("garbage")


def test_stale_cookie_falls_back_to_bearer_token(client, doctor):
    headers = {
        "Cookie": f"{COOKIE}=stale-token",
        "Authorization": f"Bearer {create_session_token(doctor.id)}",
    }

    response = client.get("/api/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["id"] == doctor.id


def test_stale_cookie_alone_is_401(client):
    response = client.get("/api/me", headers={"Cookie": f"{COOKIE}=stale-token"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid session token"
