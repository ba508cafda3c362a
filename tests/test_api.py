"""Tests for the HTTP endpoints."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from sheetsync.api import get_backend
from sheetsync.main import app
from sheetsync.models import SheetSize
from sheetsync.rate_limit import limiter
from tests.fakes import (
    DESTINATION_ID,
    DESTINATION_RANGE,
    DESTINATION_SHEET_ID,
    ORIGIN_ID,
    ORIGIN_RANGE,
    FakeSheetsBackend,
    request_body,
)

DATA = [["id", "value"], [1, "one"], [2, "two"]]


@pytest.fixture
def client(backend: FakeSheetsBackend) -> Iterator[TestClient]:
    """TestClient with the fake backend injected and rate limiting off."""
    app.dependency_overrides[get_backend] = lambda: backend
    limiter.enabled = False
    yield TestClient(app, raise_server_exceptions=False)
    limiter.enabled = True
    app.dependency_overrides.clear()


def test_health_check(client: TestClient) -> None:
    """Test basic health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "sheetsync"


def test_readiness_before_startup(client: TestClient) -> None:
    """Without a lifespan-created backend the service is still starting."""
    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "starting"


@pytest.mark.parametrize("path", ["/", "/api/sync"])
def test_sync_completed(client: TestClient, backend: FakeSheetsBackend, path: str) -> None:
    backend.set_range(ORIGIN_ID, ORIGIN_RANGE, DATA)
    backend.set_size(DESTINATION_ID, DESTINATION_SHEET_ID, SheetSize(1000, 26))

    response = client.post(path, json=request_body())

    assert response.status_code == 200
    assert response.text == "Completed"
    assert response.headers["content-type"].startswith("text/plain")
    assert len(backend.calls_to("write_range")) == 1


def test_sync_no_update_needed(client: TestClient, backend: FakeSheetsBackend) -> None:
    backend.set_range(ORIGIN_ID, ORIGIN_RANGE, DATA)
    backend.set_range(DESTINATION_ID, DESTINATION_RANGE, DATA)

    response = client.post("/api/sync", json=request_body())

    assert response.status_code == 200
    assert response.text == "No update needed; data is already synchronized."
    assert backend.mutating_calls == []


def test_missing_destination_id(client: TestClient, backend: FakeSheetsBackend) -> None:
    body = request_body()
    del body["destinationSpreadsheetId"]

    response = client.post("/api/sync", json=body)

    assert response.status_code == 400
    assert response.text == (
        "Bad Request: Missing originSpreadsheetId or destinationSpreadsheetId"
    )
    assert backend.calls == []


def test_empty_body(client: TestClient, backend: FakeSheetsBackend) -> None:
    response = client.post("/api/sync", content=b"")

    assert response.status_code == 400
    assert backend.calls == []


def test_invalid_json(client: TestClient, backend: FakeSheetsBackend) -> None:
    response = client.post(
        "/api/sync", content=b"{not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert response.text == "Bad Request: Invalid request body"
    assert backend.calls == []


def test_backend_failure_is_generic(client: TestClient, backend: FakeSheetsBackend) -> None:
    """Backend error details stay in the logs."""
    backend.fail_read = True

    response = client.post("/api/sync", json=request_body())

    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert "Simulated" not in response.text


def test_unhandled_exception(client: TestClient, backend: FakeSheetsBackend) -> None:
    async def explode(address: str, spreadsheet_id: str) -> list:
        raise RuntimeError("boom")

    backend.read_range = explode  # type: ignore[method-assign]

    response = client.post("/api/sync", json=request_body())

    assert response.status_code == 500
    assert response.text == "Internal Server Error"
