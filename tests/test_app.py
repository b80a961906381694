from alumni_connect.core.config import Settings


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert set(response.json()) == {"status", "mongodb"}


def test_unknown_route_uses_message_body(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert "message" in response.json()


def test_state_holds_injected_dependencies(app, db, settings):
    assert app.state.db is db
    assert app.state.settings is settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MONGODB_DB", "campus")
    monkeypatch.setenv("STRICT_MENTORSHIP_ACCESS", "false")

    settings = Settings()

    assert settings.mongodb_db == "campus"
    assert settings.strict_mentorship_access is False
    assert settings.session_expire_minutes == 1440
