"""Application DTOs: store-independent records and snapshot value objects."""

from app.application.dtos.analytics import (
    AnalyticsMetrics,
    GrowthData,
    LevelData,
    RegionalData,
    SportsAnalytics,
)
from app.application.dtos.dashboard import DashboardStats, RecentActivity
from app.application.dtos.program import ProgramCreate, ProgramResult, ProgramUpdate
from app.application.dtos.records import (
    AthleteRecord,
    ChildRecord,
    ContactRecord,
    EventRecord,
    ProgramRecord,
    SessionRecord,
    TrainingSessionRecord,
    UserRecord,
)
from app.application.dtos.reports import (
    AnalyticsData,
    ProgramPerformance,
    TaskCompletionPoint,
    UserEngagementMetrics,
    UserGrowthPoint,
)

__all__ = [
    "AnalyticsData",
    "AnalyticsMetrics",
    "AthleteRecord",
    "ChildRecord",
    "ContactRecord",
    "DashboardStats",
    "EventRecord",
    "GrowthData",
    "LevelData",
    "ProgramCreate",
    "ProgramPerformance",
    "ProgramRecord",
    "ProgramResult",
    "ProgramUpdate",
    "RecentActivity",
    "RegionalData",
    "SessionRecord",
    "SportsAnalytics",
    "TaskCompletionPoint",
    "TrainingSessionRecord",
    "UserEngagementMetrics",
    "UserGrowthPoint",
    "UserRecord",
]
