"""DTOs for the reports page: live analytics, engagement and program performance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserGrowthPoint:
    date: str
    total_users: int
    new_users: int


@dataclass
class TaskCompletionPoint:
    date: str
    completed: int
    pending: int
    overdue: int


@dataclass
class AnalyticsData:
    total_users: int
    active_users: int
    total_programs: int
    active_programs: int
    total_events: int
    upcoming_events: int
    completion_rate: int
    completed_tasks: int
    total_tasks: int
    user_growth: list[UserGrowthPoint]
    task_completion: list[TaskCompletionPoint]
    last_updated: datetime


@dataclass
class ProgramPerformance:
    id: str
    name: str
    status: str
    start_date: datetime | None
    end_date: datetime | None
    enrollments: int
    completions: int
    completion_rate: int
    rating: int
    last_updated: datetime


@dataclass
class UserEngagementMetrics:
    """Active-user percentages and session statistics.

    average_session_duration is in whole minutes.
    """

    weekly_engagement: int
    monthly_engagement: int
    active_last_week: int
    active_last_month: int
    average_session_duration: int
    total_sessions: int
    last_updated: datetime
