"""Application use cases: one entry point per dashboard page."""

from app.application.use_cases.dashboard import DashboardService
from app.application.use_cases.programs import ProgramService
from app.application.use_cases.reports import ReportsService
from app.application.use_cases.sports_analytics import SportsAnalyticsService

__all__ = [
    "DashboardService",
    "ProgramService",
    "ReportsService",
    "SportsAnalyticsService",
]
