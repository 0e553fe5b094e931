import os
import sys
import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

ROOT_DIR = os.path.dirname(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# keep the app's own engine off the filesystem while testing
os.environ.setdefault("DATABASE_URL", "sqlite://")

from main import app, get_session  # noqa: E402
from config import get_settings  # noqa: E402


test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
DBSession = Session
COOKIE_NAME = get_settings().cookie_name


@pytest.fixture(scope="function")
def db_session():
    """A Session on a fresh in-memory database, for store-level tests."""
    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)
    with DBSession(test_engine) as session:
        yield session


@pytest.fixture(scope="function")
def client():
    """Return a TestClient wired to a fresh in-memory database for each test.

    The base URL is https so the Secure session cookie round-trips.
    """
    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)

    def override_get_session():
        with DBSession(test_engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_helpers(client):
    """
    Common auth utilities shared across test modules.

    get_token() signs a user up (or logs them in if they exist), then empties
    the client's cookie jar and returns the raw token, so several users can
    be driven from one client with explicit Cookie headers.
    """

    def session_factory():
        with DBSession(test_engine) as session:
            yield session

    def signup_user(username: str, password: str):
        return client.post("/auth/signup", json={"username": username, "password": password})

    def login_user(username: str, password: str):
        return client.post("/auth/login", json={"username": username, "password": password})

    def get_token(username: str, password: str) -> str:
        res = signup_user(username, password)
        if res.status_code == 400:
            res = login_user(username, password)
        assert res.status_code == 200
        token = res.cookies.get(COOKIE_NAME)
        assert token
        client.cookies.clear()
        return token

    def cookie_headers(token: str) -> dict:
        return {"Cookie": f"{COOKIE_NAME}={token}"}

    return {
        "signup_user": signup_user,
        "login_user": login_user,
        "get_token": get_token,
        "cookie_headers": cookie_headers,
        "session_factory": session_factory,
    }
