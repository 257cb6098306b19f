"""Dashboard API: stat cards and recent activity (delegates to DashboardService)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import get_dashboard_service
from app.application.use_cases.dashboard import DashboardService
from app.schemas.dashboard import DashboardStatsResponse, RecentActivityItem

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    """Stat cards; partial=true when some values fell back to 0."""
    return await service.fetch_dashboard_stats()


@router.get("/recent-activity", response_model=list[RecentActivityItem])
async def get_recent_activity(
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
):
    """Newest activity across users, programs, events, athletes, training and contacts."""
    return await service.fetch_recent_activity(limit=limit)
