"""Pytest configuration and fixtures for the dashboard API.

HTTP tests build a fresh app per test with an in-memory document store on
app.state, so no Firestore credentials are needed. ASGITransport does not
run the lifespan, so the fixture also sets the registry and WebSocket
manager the lifespan would create.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.api.websocket import MetricBroadcastManager
from app.application.services.subscription_registry import SubscriptionRegistry
from app.core.limiter import limiter
from app.main import create_app
from tests.fakes import InMemoryDocumentStore


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    """Rate limits are per process; start every test with empty windows."""
    limiter.reset()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def registry() -> SubscriptionRegistry:
    return SubscriptionRegistry()


@pytest.fixture
def app(store: InMemoryDocumentStore) -> FastAPI:
    """App wired to the in-memory store."""
    application = create_app()
    application.state.document_store = store
    application.state.subscription_registry = SubscriptionRegistry()
    application.state.ws_manager = MetricBroadcastManager()
    return application


@pytest.fixture
def unconfigured_app() -> FastAPI:
    """App with no document store, as when Firestore credentials are missing."""
    application = create_app()
    application.state.document_store = None
    application.state.subscription_registry = SubscriptionRegistry()
    application.state.ws_manager = MetricBroadcastManager()
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
