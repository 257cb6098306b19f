"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the document store and application use cases.
The store, subscription registry and broadcast manager are created in the
lifespan and kept on app.state. HTTPConnection lets the same providers serve
HTTP and WebSocket routes; tests put an in-memory store on app.state.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from app.application.interfaces.document_store import IDocumentStore
from app.application.services.subscription_registry import SubscriptionRegistry
from app.application.use_cases import (
    DashboardService,
    ProgramService,
    ReportsService,
    SportsAnalyticsService,
)
from app.core.config import Settings, get_settings
from app.domain.exceptions import StoreNotConfiguredException


def get_document_store(conn: HTTPConnection) -> IDocumentStore:
    """Document store from app.state; 503 (SERVICE_UNAVAILABLE) when not configured."""
    store = getattr(conn.app.state, "document_store", None)
    if store is None:
        raise StoreNotConfiguredException()
    return store


def get_subscription_registry(conn: HTTPConnection) -> SubscriptionRegistry:
    """Process-wide subscription registry (created in lifespan)."""
    return conn.app.state.subscription_registry


StoreDep = Annotated[IDocumentStore, Depends(get_document_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_dashboard_service(store: StoreDep, settings: SettingsDep) -> DashboardService:
    return DashboardService(
        store,
        contact_collections=settings.contact_collection_names,
        recent_registration_days=settings.recent_registration_days,
        recent_activity_limit=settings.recent_activity_limit,
    )


def get_sports_analytics_service(
    store: StoreDep, settings: SettingsDep
) -> SportsAnalyticsService:
    return SportsAnalyticsService(
        store,
        tz=settings.report_tz,
        growth_months=settings.growth_months,
        top_regions=settings.top_regions_limit,
    )


def get_reports_service(
    store: StoreDep,
    settings: SettingsDep,
    registry: Annotated[SubscriptionRegistry, Depends(get_subscription_registry)],
) -> ReportsService:
    return ReportsService(
        store,
        registry,
        tz=settings.report_tz,
        user_growth_days=settings.user_growth_days,
    )


def get_program_service(store: StoreDep) -> ProgramService:
    return ProgramService(store)
