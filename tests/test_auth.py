from datetime import timedelta

from fastapi.testclient import TestClient

from alumni_connect.core.auth import create_session_token, decode_token, verify_password


def registration(**overrides) -> dict:
    data = {
        "username": "asha",
        "email": "Asha@Campus.edu",
        "password": "s3cret-pass",
        "role": "student",
        "fullName": "Asha Rao",
        "college": "Test Institute of Technology",
        "graduationYear": 2025,
        "department": "CSE",
    }
    data.update(overrides)
    return data


def test_password_hash_roundtrip(password_hash):
    assert verify_password("testpassword123", password_hash)
    assert not verify_password("wrong", password_hash)


def test_session_token_roundtrip(settings):
    token = create_session_token("64b000000000000000000001", settings)

    assert decode_token(token, settings)["sub"] == "64b000000000000000000001"


def test_expired_or_foreign_token_rejected(settings):
    expired = create_session_token("abc", settings, expires_delta=timedelta(minutes=-5))
    foreign = create_session_token("abc", settings.model_copy(update={"session_secret_key": "other"}))

    assert decode_token(expired, settings) is None
    assert decode_token(foreign, settings) is None


def test_register_sets_session_cookie(client, settings):
    response = client.post("/api/auth/register", json=registration())

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "asha"
    assert data["email"] == "asha@campus.edu"
    assert data["fullName"] == "Asha Rao"
    assert "passwordHash" not in data
    assert "password" not in data
    assert settings.session_cookie_name in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == data["id"]


def test_register_duplicate_username(client):
    client.post("/api/auth/register", json=registration())

    response = client.post("/api/auth/register", json=registration(email="other@campus.edu"))

    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}


def test_register_missing_field(client):
    data = registration()
    del data["college"]

    response = client.post("/api/auth/register", json=data)

    assert response.status_code == 400
    assert "college" in response.json()["message"]


def test_register_invalid_role(client):
    response = client.post("/api/auth/register", json=registration(role="admin"))

    assert response.status_code == 400


def test_login_and_logout(app, client):
    client.post("/api/auth/register", json=registration())
    fresh = TestClient(app)

    login = fresh.post("/api/auth/login", json={"username": "asha", "password": "s3cret-pass"})
    assert login.status_code == 200
    assert fresh.get("/api/auth/me").status_code == 200

    logout = fresh.post("/api/auth/logout")
    assert logout.status_code == 200
    assert logout.json()["message"] == "Logged out successfully"
    assert fresh.get("/api/auth/me").status_code == 401


def test_login_wrong_password(client):
    client.post("/api/auth/register", json=registration())

    response = client.post("/api/auth/login", json={"username": "asha", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_me_without_session(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}


def test_me_with_bearer_token(client, student, settings):
    token = create_session_token(student["id"], settings)

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["username"] == student["username"]


def test_session_for_deleted_user(db, login, student):
    logged_in = login(student)
    db.users.delete_many({})

    response = logged_in.get("/api/auth/me")

    assert response.status_code == 401
