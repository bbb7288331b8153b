"""
Tests for global error handling and response format consistency.
"""

import pytest
from hypothesis import given, strategies as st, settings
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager

from ..main import app
from ..database import Base, get_db
from ..exceptions import (
    APIException,
    AuthConfigurationError,
    ExecutionErrorKind,
    ExecutionFailure,
    HistoryWriteError,
    ResourceNotFoundError,
    UnauthorizedError,
)
from .auth_helpers import auth_headers


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_error_handling.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_test_client():
    """Context manager to create a test client with fresh database."""
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    
    try:
        with TestClient(app) as test_client:
            test_client.headers.update(auth_headers("user-1"))
            yield test_client
    finally:
        Base.metadata.drop_all(bind=engine)
        app.dependency_overrides.clear()


@pytest.fixture(scope="module")
def client():
    """Create test client with test database."""
    with get_test_client() as c:
        yield c


# Strategies for generating test data
resource_id_strategy = st.integers(min_value=90000, max_value=99999)

resource_path_strategy = st.sampled_from([
    "/api/requests/{id}",
    "/api/requests/{id}/history",
])


class TestErrorResponseFormat:
    """Tests for consistent error response format."""
    
    def test_404_error_format_request_not_found(self, client):
        """Test 404 error response format when request not found."""
        response = client.get("/api/requests/99999")
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "RESOURCE_NOT_FOUND"
        assert "99999" in data["detail"]
    
    def test_404_error_format_execute_not_found(self, client):
        """Test 404 error response format when executing a missing request."""
        response = client.post("/api/requests/99999/execute")
        assert response.status_code == 404
        assert "99999" in response.json()["detail"]
    
    def test_422_validation_error_format(self, client):
        """Test 422 validation error response format."""
        response = client.post("/api/requests", json={})
        assert response.status_code == 422
        data = response.json()
        assert "detail" in data
        assert data["error_code"] == "VALIDATION_ERROR"
    
    def test_validation_error_includes_field_info(self, client):
        """Test validation errors include field information."""
        response = client.post("/api/requests/execute", json={"method": "GET"})
        assert response.status_code == 422
        assert "url" in response.json()["detail"].lower()
    
    def test_401_error_format(self, client):
        """Test 401 error response format when the caller is unknown."""
        response = client.get("/api/requests", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401
        data = response.json()
        assert data["error_code"] == "UNAUTHORIZED"
        assert data["detail"] == "No token provided"


class TestAPIExceptionHierarchy:
    """Every API exception the service raises maps to a status and error code."""

    @pytest.mark.parametrize("exc, status_code, error_code", [
        (ResourceNotFoundError("Request", 1), 404, "RESOURCE_NOT_FOUND"),
        (UnauthorizedError("Invalid token"), 401, "UNAUTHORIZED"),
        (AuthConfigurationError(), 500, "AUTH_NOT_CONFIGURED"),
        (HistoryWriteError("could not record"), 500, "HISTORY_WRITE_FAILED"),
    ])
    def test_status_and_code(self, exc, status_code, error_code):
        assert isinstance(exc, APIException)
        assert exc.status_code == status_code
        assert exc.error_code == error_code


class TestExecutionFailureMessages:
    """User-facing text is derived from the failure kind."""

    @pytest.mark.parametrize("kind, message", [
        (ExecutionErrorKind.NAME_RESOLUTION_FAILED, "DNS lookup failed - Could not resolve hostname"),
        (ExecutionErrorKind.CONNECTION_REFUSED, "Connection refused - Target server is not responding"),
        (ExecutionErrorKind.TIMED_OUT, "Request timed out"),
    ])
    def test_classified_kinds_ignore_detail(self, kind, message):
        failure = ExecutionFailure(kind, "[Errno 111] low level text")
        assert failure.message == message
        assert str(failure) == message

    def test_other_kind_passes_detail_through(self):
        failure = ExecutionFailure(ExecutionErrorKind.OTHER, "certificate verify failed")
        assert failure.message == "certificate verify failed"

    def test_other_kind_without_detail(self):
        failure = ExecutionFailure(ExecutionErrorKind.OTHER)
        assert failure.message == "Request execution failed"


class TestErrorResponseFormatConsistency:
    """Every error response is JSON with a non-empty detail."""

    @given(
        resource_id=resource_id_strategy,
        path=resource_path_strategy
    )
    @settings(max_examples=50, deadline=None)
    def test_404_error_response_format_consistency(self, resource_id: int, path: str):
        """
        Property: For any non-existent request ID, the error response has a
        detail field containing the ID.
        """
        with get_test_client() as client:
            response = client.get(path.format(id=resource_id))
            
            assert response.status_code == 404
            data = response.json()
            assert isinstance(data["detail"], str) and len(data["detail"]) > 0
            assert str(resource_id) in data["detail"]
