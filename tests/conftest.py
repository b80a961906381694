"""
AlumniConnect - Test Configuration and Fixtures

Each test gets a fresh in-memory MongoDB (mongomock) and an app built
around it with create_app(). Users are inserted directly with a shared
password hash; clients are logged in by setting the session cookie.
"""
from typing import Callable

import mongomock
import pytest
from faker import Faker
from fastapi.testclient import TestClient

from alumni_connect.core.auth import create_session_token, hash_password
from alumni_connect.core.config import Settings
from alumni_connect.db.mongodb import init_indexes
from alumni_connect.main import create_app
from alumni_connect.services.mongo_service import UserService

fake = Faker()

TEST_PASSWORD = "testpassword123"
COLLEGE = "Test Institute of Technology"


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt is slow on purpose; hash once per run."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongodb_db="alumniconnect_test",
        session_secret_key="test-session-secret",
        strict_mentorship_access=True,
        log_level="WARNING",
    )


@pytest.fixture
def db():
    """Fresh in-memory database with the production indexes."""
    database = mongomock.MongoClient()["alumniconnect_test"]
    init_indexes(database)
    return database


@pytest.fixture
def app(settings: Settings, db):
    return create_app(settings=settings, db=db)


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous client."""
    return TestClient(app)


@pytest.fixture
def make_user(db, password_hash: str) -> Callable[..., dict]:
    """Factory inserting a user; keyword arguments override profile fields."""

    def factory(role: str = "student", college: str = COLLEGE, **fields) -> dict:
        data = {
            "username": fake.unique.user_name(),
            "email": fake.unique.email(),
            "role": role,
            "fullName": fake.name(),
            "college": college,
        }
        data.update(fields)
        return UserService(db).create(data, password_hash=password_hash)

    return factory


@pytest.fixture
def login(app, settings: Settings) -> Callable[[dict], TestClient]:
    """Return a new client carrying a session cookie for the given user."""

    def factory(user: dict) -> TestClient:
        logged_in = TestClient(app)
        logged_in.cookies.set(settings.session_cookie_name, create_session_token(user["id"], settings))
        return logged_in

    return factory


@pytest.fixture
def student(make_user) -> dict:
    return make_user(role="student")


@pytest.fixture
def alumnus(make_user) -> dict:
    return make_user(role="alumni", company="Google", position="Software Engineer")


@pytest.fixture
def staff(make_user) -> dict:
    return make_user(role="staff")
