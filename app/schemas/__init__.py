"""Pydantic request/response schemas for the API."""

from app.schemas.analytics import (
    AnalyticsMetricsResponse,
    GrowthDataItem,
    LevelDataItem,
    RegionalDataItem,
    SportsAnalyticsResponse,
)
from app.schemas.dashboard import DashboardStatsResponse, RecentActivityItem
from app.schemas.health import HealthResponse
from app.schemas.program import (
    ProgramCreateRequest,
    ProgramResponse,
    ProgramUpdateRequest,
)
from app.schemas.reports import (
    AnalyticsDataResponse,
    ProgramPerformanceItem,
    UserEngagementResponse,
)
from app.schemas.websocket import MetricUpdateMessage, WebSocketStatusResponse

__all__ = [
    "AnalyticsDataResponse",
    "AnalyticsMetricsResponse",
    "DashboardStatsResponse",
    "GrowthDataItem",
    "HealthResponse",
    "LevelDataItem",
    "MetricUpdateMessage",
    "ProgramCreateRequest",
    "ProgramPerformanceItem",
    "ProgramResponse",
    "ProgramUpdateRequest",
    "RecentActivityItem",
    "RegionalDataItem",
    "SportsAnalyticsResponse",
    "UserEngagementResponse",
    "WebSocketStatusResponse",
]
