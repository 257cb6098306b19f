"""Sports analytics API: chart data for the analytics page."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import get_sports_analytics_service
from app.application.use_cases.sports_analytics import SportsAnalyticsService
from app.core.limiter import limit_reports
from app.schemas.analytics import (
    AnalyticsMetricsResponse,
    GrowthDataItem,
    LevelDataItem,
    RegionalDataItem,
    SportsAnalyticsResponse,
)

router = APIRouter()

ServiceDep = Annotated[SportsAnalyticsService, Depends(get_sports_analytics_service)]


@router.get("", response_model=SportsAnalyticsResponse)
@limit_reports
async def get_sports_analytics(request: Request, service: ServiceDep):
    """Regional, level, growth and headline metrics in one response."""
    return await service.fetch_all()


@router.get("/regional", response_model=list[RegionalDataItem])
async def get_regional_data(service: ServiceDep):
    return await service.fetch_regional_data()


@router.get("/levels", response_model=list[LevelDataItem])
async def get_level_data(service: ServiceDep):
    return await service.fetch_level_data()


@router.get("/growth", response_model=list[GrowthDataItem])
async def get_growth_data(
    service: ServiceDep,
    months: Annotated[int | None, Query(ge=1, le=24)] = None,
):
    """Cumulative athletes and events per month, oldest month first."""
    return await service.fetch_growth_data(months=months)


@router.get("/metrics", response_model=AnalyticsMetricsResponse)
async def get_analytics_metrics(service: ServiceDep):
    return await service.fetch_analytics_metrics()
