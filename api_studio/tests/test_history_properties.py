"""
Property-based tests for execution history.

Covers the bounded in-memory ledger, the history API and the history
table that mirrors the ledger across restarts.
"""

import json
from contextlib import contextmanager

import httpx
import pytest
from hypothesis import given, strategies as st, settings
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from api_studio.main import app
from api_studio.database import Base, get_db
from api_studio.dependencies import get_controller
from api_studio.models.history import History
from api_studio.schemas.history import ExecutionRecord
from api_studio.services.execution_controller import ExecutionController
from api_studio.services.history_ledger import HistoryLedger
from api_studio.services.history_service import clear_history, load_history, restore_ledger, save_history
from api_studio.services.proxy_client import ProxyClient


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_history_properties.db"
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


def echo_proxy(request: httpx.Request) -> httpx.Response:
    """Proxy stand-in answering 200 with the forwarded URL as data."""
    payload = json.loads(request.content)
    return httpx.Response(200, json={
        "status": 200,
        "statusText": "OK",
        "data": {"url": payload["url"]},
        "headers": {"content-type": "application/json"},
    })


@contextmanager
def get_test_client(capacity: int = 50):
    """Context manager to create a test client with fresh database and history."""
    Base.metadata.create_all(bind=test_engine)
    controller = ExecutionController(
        ProxyClient("http://proxy.test/proxy", transport=httpx.MockTransport(echo_proxy)),
        HistoryLedger(capacity),
    )
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_controller] = lambda: controller

    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        Base.metadata.drop_all(bind=test_engine)
        app.dependency_overrides.clear()


def get_test_db():
    """Get a test database session for direct database operations."""
    return TestSessionLocal()


def send(client: TestClient, url: str, method: str = "GET") -> dict:
    response = client.post("/api/execute/tab-1", json={"request": {"method": method, "url": url}})
    assert response.status_code == 200
    return response.json()


def make_record(i: int) -> ExecutionRecord:
    return ExecutionRecord(method="GET", url=f"https://api.test/{i}", status=200, status_text="OK")


http_method_strategy = st.sampled_from(["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"])


class TestHistoryLedger:
    """The ledger keeps the newest records up to its capacity."""

    @given(
        capacity=st.integers(min_value=1, max_value=10),
        count=st.integers(min_value=0, max_value=25)
    )
    @settings(max_examples=100)
    def test_keeps_newest_records_up_to_capacity(self, capacity: int, count: int):
        ledger = HistoryLedger(capacity)
        records = [make_record(i) for i in range(count)]

        for record in records:
            ledger.append(record)

        assert len(ledger) == min(count, capacity)
        assert ledger.snapshot() == list(reversed(records))[:capacity]

    def test_default_capacity_evicts_oldest(self):
        ledger = HistoryLedger()
        records = [make_record(i) for i in range(55)]

        for record in records:
            ledger.append(record)

        assert len(ledger) == 50
        assert ledger[0] is records[-1]
        assert ledger[-1] is records[5]
        assert all(ledger.get(r.id) is None for r in records[:5])

    def test_initial_records_are_trimmed_to_capacity(self):
        records = [make_record(i) for i in range(5)]

        ledger = HistoryLedger(3, records)

        assert ledger.snapshot() == records[:3]

    def test_clear(self):
        ledger = HistoryLedger(records=[make_record(1)])

        ledger.clear()

        assert len(ledger) == 0
        assert ledger.snapshot() == []

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            HistoryLedger(0)


class TestHistoryApi:
    """Sends show up in the history list, newest first."""

    @given(methods=st.lists(http_method_strategy, min_size=1, max_size=5))
    @settings(max_examples=20, deadline=None)
    def test_history_list_is_newest_first(self, methods: list[str]):
        with get_test_client() as client:
            for i, method in enumerate(methods):
                send(client, f"https://api.test/item/{i}", method)

            listing = client.get("/api/history").json()

            assert listing["total"] == len(methods)
            assert [item["url"] for item in listing["items"]] == [
                f"https://api.test/item/{i}" for i in reversed(range(len(methods)))
            ]
            assert [item["method"] for item in listing["items"]] == list(reversed(methods))

    def test_get_record_by_id(self):
        with get_test_client() as client:
            result = send(client, "https://api.test/users")

            response = client.get(f"/api/history/{result['record_id']}")

            assert response.status_code == 200
            record = response.json()
            assert record["status"] == 200
            assert record["status_text"] == "OK"
            assert record["response_body"] == {"url": "https://api.test/users"}
            assert record["request"]["url"] == "https://api.test/users"

    def test_unknown_record_is_404(self):
        with get_test_client() as client:
            response = client.get("/api/history/deadbeef")

            assert response.status_code == 404
            assert "deadbeef" in response.json()["detail"]

    def test_pagination(self):
        with get_test_client() as client:
            for i in range(5):
                send(client, f"https://api.test/{i}")

            listing = client.get("/api/history", params={"skip": 1, "limit": 2}).json()

            assert listing["total"] == 5
            assert [item["url"] for item in listing["items"]] == [
                "https://api.test/3", "https://api.test/2"
            ]

    def test_list_respects_capacity(self):
        with get_test_client(capacity=3) as client:
            for i in range(5):
                send(client, f"https://api.test/{i}")

            listing = client.get("/api/history").json()

            assert listing["total"] == 3
            assert listing["items"][0]["url"] == "https://api.test/4"

    def test_clear_history(self):
        with get_test_client() as client:
            send(client, "https://api.test/a")
            send(client, "https://api.test/b")

            assert client.delete("/api/history").status_code == 204
            assert client.get("/api/history").json() == {"items": [], "total": 0}

            db = get_test_db()
            try:
                assert db.query(History).count() == 0
            finally:
                db.close()


class TestHistoryPersistence:
    """The history table mirrors the ledger and restores it on startup."""

    def test_sends_are_written_to_the_table(self):
        with get_test_client() as client:
            result = send(client, "https://api.test/persisted")

            db = get_test_db()
            try:
                row = db.query(History).one()
                assert row.record_id == result["record_id"]
                assert row.url == "https://api.test/persisted"
                assert row.status == "200"
            finally:
                db.close()

    @given(count=st.integers(min_value=0, max_value=8))
    @settings(max_examples=20, deadline=None)
    def test_table_is_trimmed_and_restored_newest_first(self, count: int):
        Base.metadata.create_all(bind=test_engine)
        db = get_test_db()
        try:
            records = [make_record(i) for i in range(count)]
            for record in records:
                save_history(db, record, capacity=5)

            assert db.query(History).count() == min(count, 5)

            ledger = restore_ledger(db, capacity=5)
            assert [r.id for r in ledger] == [r.id for r in reversed(records)][:5]
            assert [r.url for r in load_history(db, capacity=2)] == [
                r.url for r in reversed(records)
            ][:2]

            clear_history(db)
            assert load_history(db) == []
        finally:
            db.close()
            Base.metadata.drop_all(bind=test_engine)

    def test_record_round_trips_through_storage(self):
        Base.metadata.create_all(bind=test_engine)
        db = get_test_db()
        try:
            record = ExecutionRecord(
                method="POST",
                url="https://api.test/items",
                status="ERR",
                status_text="Failed to reach proxy",
                request_headers={"Content-Type": "application/json"},
                request_body={"name": "x"},
            )
            save_history(db, record)

            restored = load_history(db)[0]

            assert restored == record
        finally:
            db.close()
            Base.metadata.drop_all(bind=test_engine)
