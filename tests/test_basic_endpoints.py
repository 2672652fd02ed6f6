import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient
from src.main import app

client = TestClient(app)

def test_health_check():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "is running" in data["message"]
    assert "timestamp" in data

def test_unknown_route_returns_error_envelope():
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "Route GET /api/does-not-exist not found",
    }

def test_support_request_rejects_get():
    response = client.get("/api/support-request")
    assert response.status_code == 405
    assert response.json()["success"] is False

def test_cors_allows_configured_origin():
    response = client.options(
        "/api/support-request",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers

@pytest.mark.asyncio
async def test_health_check_async(client: AsyncClient):
    """
    TEST: Health check responds with an ISO-8601 timestamp.
    """
    from datetime import datetime

    resp = await client.get("/api/health")
    assert resp.status_code == 200
    datetime.fromisoformat(resp.json()["timestamp"])
