"""
Integration tests for the HTTP API.
Tests chat, sample sync, authorization and the daily summary.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from app.api.deps import get_health_store
from app.core.exceptions import UnknownError
from app.main import app
from app.models import HealthSampleBatch, MetricType
from app.storage import HealthDataStore, InMemoryHealthStore, LocalHealthStore

NOW = "2026-10-14T15:30:00+00:00"
# Same instant without an offset; read in the configured zone (UTC in tests)
NAIVE_NOW = "2026-10-14T15:30:00"


@pytest.fixture
def store():
    return InMemoryHealthStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_health_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def samples_payload():
    return {
        "steps": [
            {"value": 4000, "start": "2026-10-14T08:00:00Z", "end": "2026-10-14T09:00:00Z"},
            {"value": 6500, "start": "2026-10-14T12:00:00Z", "end": "2026-10-14T13:00:00Z"},
        ],
        "heart_rate": [
            {"value": 101, "timestamp": "2026-10-14T09:00:00Z"},
            {"value": 105, "timestamp": "2026-10-14T10:00:00Z"},
        ],
        "sleep": [
            {"kind": "asleepCore", "start": "2026-10-14T00:00:00Z", "end": "2026-10-14T04:00:00Z"},
            {"kind": "asleepREM", "start": "2026-10-14T04:30:00Z", "end": "2026-10-14T06:00:00Z"},
        ],
        "active_energy": [
            {"value": 150, "start": "2026-10-14T08:00:00Z", "end": "2026-10-14T09:00:00Z"},
        ],
    }


class TestServiceEndpoints:
    """Tests for root and liveness endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestChatAPI:
    """Tests for the chat endpoint."""

    def test_greeting(self, client):
        response = client.post("/chat/message", json={"role": "user", "content": "hello"})
        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "assistant"
        assert data["content"].startswith("Hello!")

    def test_steps_after_sync(self, client, samples_payload):
        assert client.post("/health/samples", json=samples_payload).status_code == 201

        response = client.post(
            "/chat/message",
            json={"role": "user", "content": "how many steps today?"},
            params={"now": NOW},
        )
        assert response.status_code == 200
        assert response.json()["content"] == (
            "You've taken 10500 steps. Great job hitting your 10,000 step goal! 🎉"
        )

    def test_heart_rate_after_sync(self, client, samples_payload):
        client.post("/health/samples", json=samples_payload)
        response = client.post(
            "/chat/message",
            json={"role": "user", "content": "what's my pulse"},
            params={"now": NOW},
        )
        assert response.json()["content"].startswith("Your average heart rate is 103 bpm.")

    def test_store_failure_is_still_200(self, client):
        failing = AsyncMock(spec=HealthDataStore)
        failing.get_sleep.side_effect = UnknownError("offline")
        app.dependency_overrides[get_health_store] = lambda: failing

        response = client.post(
            "/chat/message", json={"role": "user", "content": "how did I sleep"}, params={"now": NOW}
        )
        assert response.status_code == 200
        assert "trouble accessing your health data" in response.json()["content"]

    def test_now_without_offset(self, client, samples_payload):
        client.post("/health/samples", json=samples_payload)
        response = client.post(
            "/chat/message",
            json={"role": "user", "content": "how many steps today?"},
            params={"now": NAIVE_NOW},
        )
        assert response.status_code == 200
        assert response.json()["content"].startswith("You've taken 10500 steps.")

    def test_missing_content(self, client):
        response = client.post("/chat/message", json={"role": "user"})
        assert response.status_code == 422


class TestHealthAPI:
    """Tests for sample sync, authorization and summary."""

    def test_sync_counts(self, client, samples_payload):
        response = client.post("/health/samples", json=samples_payload)
        assert response.status_code == 201
        assert response.json()["added"] == {
            "steps": 2, "heart_rate": 2, "sleep": 2, "active_energy": 1
        }

    def test_sync_rejects_negative_values(self, client):
        response = client.post(
            "/health/samples",
            json={"steps": [{"value": -5, "start": "2026-10-14T08:00:00Z", "end": "2026-10-14T09:00:00Z"}]},
        )
        assert response.status_code == 422

    def test_authorize(self, client):
        store = InMemoryHealthStore(authorize_all=False)
        app.dependency_overrides[get_health_store] = lambda: store

        response = client.post("/health/authorize", json={"metrics": ["sleep", "steps"]})
        assert response.status_code == 200
        assert response.json()["authorized"] == ["sleep", "steps"]

    def test_read_only_store(self, client):
        app.dependency_overrides[get_health_store] = lambda: AsyncMock(spec=HealthDataStore)
        response = client.post("/health/authorize", json={"metrics": ["steps"]})
        assert response.status_code == 501

    def test_summary(self, client, samples_payload):
        client.post("/health/samples", json=samples_payload)
        response = client.get("/health/summary", params={"now": NOW})
        assert response.status_code == 200
        data = response.json()
        assert data["steps"] == 10500
        assert data["heart_rate_avg"] == pytest.approx(103.0)
        # One session 00:00-06:00; the 30 minute gap does not split it
        assert data["sleep_minutes"] == 360
        assert data["active_energy"] == pytest.approx(150.0)

    def test_summary_without_data(self, client):
        response = client.get("/health/summary", params={"now": NOW})
        assert response.status_code == 200
        data = response.json()
        assert data["steps"] is None
        assert data["sleep_minutes"] is None

    def test_summary_with_now_without_offset(self, client, samples_payload):
        client.post("/health/samples", json=samples_payload)
        response = client.get("/health/summary", params={"now": NAIVE_NOW})
        assert response.status_code == 200
        data = response.json()
        assert data["steps"] == 10500
        assert data["sleep_minutes"] == 360

    def test_sync_rejects_timestamps_without_offset(self, client, store):
        response = client.post(
            "/health/samples",
            json={"heart_rate": [{"value": 70, "timestamp": "2026-10-14T09:00:00"}]},
        )
        assert response.status_code == 422
        assert store.snapshot() == HealthSampleBatch()

    def test_sync_rejects_non_positive_heart_rate(self, client):
        response = client.post(
            "/health/samples",
            json={"heart_rate": [{"value": -70, "timestamp": "2026-10-14T09:00:00Z"}]},
        )
        assert response.status_code == 422


class TestPersistenceFailures:
    """Tests for write endpoints when the data file cannot be written."""

    @pytest.fixture
    def local_store(self, tmp_path, monkeypatch):
        store = LocalHealthStore(str(tmp_path), authorize_all=False)

        async def failing_save():
            raise UnknownError("disk full")

        monkeypatch.setattr(store, "save", failing_save)
        app.dependency_overrides[get_health_store] = lambda: store
        yield store
        app.dependency_overrides.clear()

    def test_sync_failure_leaves_store_unchanged(self, local_store, samples_payload):
        client = TestClient(app)
        response = client.post("/health/samples", json=samples_payload)

        assert response.status_code == 500
        assert "could not be saved" in response.json()["detail"]
        assert local_store.snapshot() == HealthSampleBatch()

        # Once the disk recovers a retry stores the batch exactly once
        del local_store.save
        assert client.post("/health/samples", json=samples_payload).status_code == 201
        assert len(local_store.snapshot().steps) == 2

    def test_authorize_failure_leaves_grants_unchanged(self, local_store):
        response = TestClient(app).post("/health/authorize", json={"metrics": ["steps"]})

        assert response.status_code == 500
        assert not local_store.is_authorized(MetricType.STEPS)
