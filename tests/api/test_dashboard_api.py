"""Dashboard and analytics routes over the in-memory store."""

from datetime import timedelta

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.shared.utils.datetime import utc_now
from tests.fakes import InMemoryDocumentStore


async def test_dashboard_stats_empty_store(client: AsyncClient) -> None:
    response = await client.get("/api/v1/dashboard/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 0
    assert data["tasks_completed"] == 0
    assert data["partial"] is False
    assert "computed_at" in data


async def test_dashboard_stats_counts(client: AsyncClient, store: InMemoryDocumentStore) -> None:
    store.add("users", "u1", {"createdAt": utc_now()})
    store.add("tasks", "t1", {"status": "completed"})
    store.add("tasks", "t2", {"status": "pending"})
    store.add("events", "e1", {"startDate": utc_now() - timedelta(days=1)})
    response = await client.get("/api/v1/dashboard/stats")
    data = response.json()
    assert data["total_users"] == 1
    assert data["recent_registrations"] == 1
    assert data["tasks_completed"] == 50
    assert data["upcoming_events"] == 1


async def test_recent_activity(client: AsyncClient, store: InMemoryDocumentStore) -> None:
    store.add("programs", "p1", {"name": "Camp", "createdAt": utc_now()})
    response = await client.get("/api/v1/dashboard/recent-activity", params={"limit": 5})
    assert response.status_code == 200
    items = response.json()
    assert items[0]["id"] == "program_p1"
    assert items[0]["type"] == "program_created"
    assert items[0]["time_ago"] == "Just now"


async def test_recent_activity_limit_is_validated(client: AsyncClient) -> None:
    response = await client.get("/api/v1/dashboard/recent-activity", params={"limit": 0})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_sports_analytics_bundle(client: AsyncClient, store: InMemoryDocumentStore) -> None:
    store.add("athletes", "a1", {"location": "Gulu", "level": "Pro", "createdAt": utc_now()})
    response = await client.get("/api/v1/analytics")
    assert response.status_code == 200
    data = response.json()
    assert data["regional_data"] == [{"region": "Gulu", "athlete_count": 1, "event_count": 0}]
    assert [lvl["name"] for lvl in data["level_data"]] == ["Grassroots", "Semi-Pro", "Professional"]
    assert len(data["growth_data"]) == 6
    assert data["growth_data"][-1]["athletes"] == 1
    assert data["metrics"]["athletes_scouted"] == 0


async def test_analytics_sub_routes(client: AsyncClient) -> None:
    for path in ("/regional", "/levels", "/metrics"):
        response = await client.get(f"/api/v1/analytics{path}")
        assert response.status_code == 200, path
    growth = await client.get("/api/v1/analytics/growth", params={"months": 3})
    assert len(growth.json()) == 3
    assert (await client.get("/api/v1/analytics/growth", params={"months": 30})).status_code == 422


async def test_store_routes_return_503_without_store(unconfigured_app: FastAPI) -> None:
    transport = ASGITransport(app=unconfigured_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/api/v1/dashboard/stats")
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"
