"""
API endpoint tests
"""

import uuid
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from api.main import app
from api.dependencies import get_db
from models.base import HarvestStatus
from models.harvest_run import HarvestRun
from models.inscription import Inscription


def scalar_result(value):
    result = MagicMock()
    result.scalar.return_value = value
    return result


def rows_result(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    result.scalars.return_value.first.return_value = rows[0] if rows else None
    return result


def make_inscription(inscription_id, height=800000, number=0, **fields):
    return Inscription(
        id=inscription_id,
        number=number,
        genesis_block_height=height,
        sat="1956234567890123",
        created_at=datetime(2024, 1, 15, 10, 0),
        **fields
    )


def make_run(height, status):
    started = datetime(2024, 1, 15, 10, 0)
    return HarvestRun(
        run_id=uuid.uuid4(),
        block_height=height,
        status=status,
        started_at=started,
        completed_at=started,
        duration_seconds=1.5,
        inscriptions_enumerated=3,
        inscriptions_loaded=3,
        inscriptions_failed=0
    )


@pytest.fixture
def db_mock():
    return AsyncMock()


@pytest.fixture
def client(db_mock):
    """Create test client with database override"""

    async def override_get_db():
        yield db_mock

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "/stats" in response.json()["endpoints"].values()


def test_request_id_header(client):
    response = client.get("/", headers={"X-Request-ID": "req_fixed"})

    assert response.headers["X-Request-ID"] == "req_fixed"
    assert "X-API-Latency-ms" in response.headers


def test_health_endpoint_database_connected(client, db_mock):
    db_mock.execute.side_effect = [
        MagicMock(),
        scalar_result(800003),
        rows_result([make_run(800003, HarvestStatus.SUCCESS)]),
    ]

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database_connected"] is True
    assert data["checkpoint_block"] == 800003
    assert data["last_run"]["status"] == "success"


def test_health_degraded_after_failed_run(client, db_mock):
    db_mock.execute.side_effect = [
        MagicMock(),
        scalar_result(800003),
        rows_result([make_run(800003, HarvestStatus.FAILED)]),
    ]

    response = client.get("/health")

    assert response.json()["status"] == "degraded"


def test_health_database_down(client, db_mock):
    db_mock.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database_connected"] is False


def test_get_inscription(client, db_mock):
    db_mock.get.return_value = make_inscription(
        "abci0",
        number=42,
        inscription_metadata={"name": "x"},
        content_type="text/plain"
    )

    response = client.get("/inscriptions/abci0")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "abci0"
    assert data["number"] == 42
    assert data["sat"] == "1956234567890123"
    assert data["metadata"] == {"name": "x"}


def test_get_inscription_not_found(client, db_mock):
    db_mock.get.return_value = None

    response = client.get("/inscriptions/missing")

    assert response.status_code == 404


def test_block_inscriptions_pagination(client, db_mock):
    db_mock.execute.side_effect = [
        scalar_result(3),
        rows_result([make_inscription("a", number=0), make_inscription("b", number=1)]),
    ]

    response = client.get("/blocks/800000/inscriptions?page=1&page_size=2")

    assert response.status_code == 200
    data = response.json()
    assert data["block_height"] == 800000
    assert [item["id"] for item in data["items"]] == ["a", "b"]
    assert data["pagination"]["total_items"] == 3
    assert data["pagination"]["total_pages"] == 2
    assert data["pagination"]["has_next"] is True
    assert data["pagination"]["has_previous"] is False


def test_block_inscriptions_rejects_bad_page(client):
    response = client.get("/blocks/800000/inscriptions?page=0")

    assert response.status_code == 422


def test_stats(client, db_mock):
    status_counts = MagicMock()
    status_counts.all.return_value = [(HarvestStatus.SUCCESS, 3), (HarvestStatus.FAILED, 1)]
    db_mock.execute.side_effect = [
        scalar_result(120),
        scalar_result(800003),
        status_counts,
        scalar_result(1.234),
        rows_result([make_run(800003, HarvestStatus.SUCCESS)]),
    ]

    response = client.get("/stats?limit=5", headers={"X-Request-ID": "req_stats"})

    assert response.status_code == 200
    data = response.json()
    assert data["total_inscriptions"] == 120
    assert data["checkpoint_block"] == 800003
    assert data["total_runs"] == 4
    assert data["runs_by_status"] == {"success": 3, "failed": 1}
    assert data["avg_block_duration_seconds"] == 1.23
    assert len(data["recent_runs"]) == 1
    assert data["request_id"] == "req_stats"
