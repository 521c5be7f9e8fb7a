"""
Tests for global error handling and response format consistency.

Every error response is JSON with a non-empty ``detail``; errors raised by
the application also carry an ``error_code``.
"""

import pytest
from hypothesis import given, strategies as st, settings
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager

from api_studio.main import app
from api_studio.database import Base, get_db


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
    try:
        db = TestingSessionLocal()
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
            yield test_client
    finally:
        Base.metadata.drop_all(bind=engine)
        app.dependency_overrides.clear()


@pytest.fixture(scope="module")
def client():
    """Create test client with test database."""
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


# Strategies for generating test data
resource_id_strategy = st.integers(min_value=90000, max_value=99999)

invalid_http_method_strategy = st.text(
    alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZ"),
    min_size=1,
    max_size=10
).filter(lambda m: m not in ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"])


class TestErrorResponseFormat:
    """Tests for consistent error response format."""

    def test_404_error_format_environment_not_found(self, client):
        response = client.get("/api/environments/99999")
        assert response.status_code == 404
        data = response.json()
        assert "detail" in data
        assert "99999" in data["detail"]

    def test_404_error_format_variable_not_found(self, client):
        response = client.delete("/api/environments/variables/99999")
        assert response.status_code == 404
        assert "99999" in response.json()["detail"]

    def test_404_error_format_history_not_found(self, client):
        response = client.get("/api/history/abc123")
        assert response.status_code == 404
        data = response.json()
        assert "abc123" in data["detail"]
        assert data["error_code"] == "RESOURCE_NOT_FOUND"

    def test_404_unknown_environment_on_send(self, client):
        response = client.post("/api/execute/tab", json={
            "request": {"method": "GET", "url": "https://api.test"},
            "environment_id": 99999
        })
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "RESOURCE_NOT_FOUND"
        assert "99999" in data["detail"]

    def test_422_validation_error_format(self, client):
        response = client.post("/api/environments", json={})
        assert response.status_code == 422
        data = response.json()
        assert "detail" in data
        assert data["error_code"] == "VALIDATION_ERROR"

    def test_validation_error_includes_field_info(self, client):
        response = client.post("/api/execute/tab", json={"environment_id": 1})
        assert response.status_code == 422
        data = response.json()
        assert "request" in data["detail"].lower()

    def test_invalid_auth_type_is_rejected(self, client):
        response = client.post("/api/execute/preview", json={
            "request": {"url": "https://api.test", "auth_type": "oauth2"}
        })
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_400_curl_without_url(self, client):
        response = client.post("/api/curl/import", json={"command": "curl -X POST -H 'A: b'"})
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "CURL_PARSE_ERROR"
        assert data["detail"]

    def test_error_response_has_detail_field(self, client):
        error_responses = [
            client.get("/api/environments/99999"),
            client.post("/api/environments/99999/activate"),
            client.get("/api/history/missing"),
            client.post("/api/curl/import", json={"command": ""}),
        ]

        for response in error_responses:
            assert response.status_code >= 400
            data = response.json()
            assert "detail" in data, f"Response missing 'detail' field: {data}"


class TestErrorResponseFormatConsistency:
    """
    For any request that fails (missing resource, invalid input) the
    response is JSON with an error detail and a fitting status code.
    """

    @given(resource_id=resource_id_strategy)
    @settings(max_examples=25, deadline=None)
    def test_404_error_response_format_consistency(self, resource_id: int):
        with get_test_client() as client:
            for endpoint in [
                f"/api/environments/{resource_id}",
                f"/api/history/{resource_id}",
            ]:
                response = client.get(endpoint)

                assert response.status_code == 404
                data = response.json()
                assert isinstance(data["detail"], str) and data["detail"]
                assert str(resource_id) in data["detail"], \
                    f"Error detail should contain resource ID {resource_id}: {data['detail']}"

    @given(invalid_method=invalid_http_method_strategy)
    @settings(max_examples=25, deadline=None)
    def test_422_validation_error_format_consistency(self, invalid_method: str):
        with get_test_client() as client:
            response = client.post("/api/execute/preview", json={
                "request": {"method": invalid_method, "url": "https://api.test"}
            })

            assert response.status_code == 422
            data = response.json()
            assert "detail" in data, f"Validation error missing 'detail' field: {data}"
            assert data["error_code"] == "VALIDATION_ERROR"
