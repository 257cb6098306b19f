"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual store/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    analytics,
    dashboard,
    health,
    programs,
    reports,
    websocket as ws_endpoint,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(programs.router, prefix="/programs", tags=["programs"])
api_router.include_router(ws_endpoint.router, prefix="/ws", tags=["websocket"])
