"""Reports API: one-shot snapshots of the live report families.

Each snapshot fans out into many store queries, so routes are rate limited.
For push updates use the WebSocket at /ws/reports/{family}.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_reports_service
from app.application.use_cases.reports import ReportsService
from app.core.limiter import limit_reports
from app.schemas.reports import (
    AnalyticsDataResponse,
    ProgramPerformanceItem,
    UserEngagementResponse,
)

router = APIRouter()

ServiceDep = Annotated[ReportsService, Depends(get_reports_service)]


@router.get("/analytics", response_model=AnalyticsDataResponse)
@limit_reports
async def get_analytics_data(request: Request, service: ServiceDep):
    """Totals plus 30-day user growth and task completion series."""
    return await service.get_analytics_data()


@router.get("/engagement", response_model=UserEngagementResponse)
@limit_reports
async def get_user_engagement(request: Request, service: ServiceDep):
    return await service.get_user_engagement_metrics()


@router.get("/programs", response_model=list[ProgramPerformanceItem])
@limit_reports
async def get_program_performance(request: Request, service: ServiceDep):
    """Enrollment and completion counts per program, newest program first."""
    return await service.get_program_performance_metrics()
