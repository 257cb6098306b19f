"""Smoke tests for health and app wiring."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200, status ok and a configured store."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"
    assert data.get("store_configured") is True


async def test_health_without_store(unconfigured_app: FastAPI) -> None:
    """Health still answers when the store is not configured."""
    transport = ASGITransport(app=unconfigured_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["store_configured"] is False


async def test_response_carries_request_id(client: AsyncClient) -> None:
    """A valid client request id is echoed back; an unsafe one is replaced."""
    ok = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert ok.headers["X-Request-ID"] == "abc-123"

    replaced = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id!"})
    assert replaced.headers["X-Request-ID"] != "bad id!"
    assert len(replaced.headers["X-Request-ID"]) == 36


async def test_security_headers_present(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers.get("X-Content-Type-Options") == "nosniff"
