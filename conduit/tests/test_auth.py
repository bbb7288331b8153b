"""
Tests for bearer token authentication on the /api/requests routes.
"""

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from conduit.main import app
from conduit.auth import create_access_token, decode_access_token
from conduit.config import Settings, get_settings
from conduit.database import Base, get_db
from conduit.exceptions import AuthConfigurationError, UnauthorizedError
from conduit.tests.auth_helpers import TEST_JWT_SECRET, TEST_SETTINGS, auth_headers


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_auth.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)


@event.listens_for(test_engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client():
    """Create a test client with fresh database and no default credentials."""
    Base.metadata.create_all(bind=test_engine)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: TEST_SETTINGS

    with TestClient(app) as test_client:
        yield test_client

    Base.metadata.drop_all(bind=test_engine)
    app.dependency_overrides.clear()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestBearerToken:
    """Every saved request route requires a valid bearer token."""

    @pytest.mark.parametrize("headers", [
        {},
        {"Authorization": ""},
        {"Authorization": "Token abc"},
        {"Authorization": "bearer abc"},
    ])
    def test_missing_token(self, client, headers):
        response = client.get("/api/requests", headers=headers)

        assert response.status_code == 401
        assert response.json() == {"detail": "No token provided", "error_code": "UNAUTHORIZED"}

    def test_bad_signature(self, client):
        forged = create_access_token("alice", Settings(jwt_secret="someone-else"))

        response = client.get("/api/requests", headers=bearer(forged))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_malformed_token(self, client):
        response = client.get("/api/requests", headers=bearer("not.a.jwt"))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_expired_token(self, client):
        response = client.get("/api/requests", headers=auth_headers("alice", expires_in=-60))

        assert response.status_code == 401
        assert response.json()["detail"] == "Token expired"

    def test_token_without_user_id(self, client):
        token = jwt.encode({"sub": "alice"}, TEST_JWT_SECRET, algorithm="HS256")

        response = client.get("/api/requests", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_execute_requires_token(self, client):
        response = client.post(
            "/api/requests/execute",
            json={"method": "GET", "url": "https://api.example.com/"}
        )

        assert response.status_code == 401

    def test_history_requires_token(self, client):
        response = client.get("/api/requests/1/history")

        assert response.status_code == 401

    def test_owner_comes_from_token_claims(self, client):
        created = client.post(
            "/api/requests",
            json={"name": "Ping", "method": "GET", "url": "https://api.example.com/ping"},
            headers=auth_headers("alice"),
        )
        assert created.status_code == 201
        assert created.json()["userId"] == "alice"

        mine = client.get("/api/requests", headers=auth_headers("alice")).json()
        theirs = client.get("/api/requests", headers=auth_headers("bob")).json()

        assert [item["id"] for item in mine] == [created.json()["id"]]
        assert theirs == []

    def test_unconfigured_secret_is_server_error(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings()

        response = client.get("/api/requests", headers=auth_headers("alice"))

        assert response.status_code == 500
        assert response.json()["error_code"] == "AUTH_NOT_CONFIGURED"


class TestTokenHelpers:
    """Issuing and verifying tokens directly."""

    def test_issued_token_round_trips(self):
        token = create_access_token("alice", TEST_SETTINGS, email="alice@example.com")

        assert decode_access_token(token, TEST_SETTINGS) == "alice"
        claims = jwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])
        assert claims["email"] == "alice@example.com"
        assert claims["exp"] - claims["iat"] == TEST_SETTINGS.jwt_expires_in

    def test_expired_token_is_rejected(self):
        token = create_access_token("alice", TEST_SETTINGS, expires_in=-1)

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token, TEST_SETTINGS)

        assert exc_info.value.detail == "Token expired"

    def test_missing_secret_is_rejected(self):
        with pytest.raises(AuthConfigurationError):
            create_access_token("alice", Settings())
