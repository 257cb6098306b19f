"""Reports page API schemas (also the payloads of live WebSocket pushes)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserGrowthPointItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str = Field(..., description="Calendar day, YYYY-MM-DD")
    total_users: int
    new_users: int


class TaskCompletionPointItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    completed: int
    pending: int
    overdue: int


class AnalyticsDataResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_users: int
    active_users: int
    total_programs: int
    active_programs: int
    total_events: int
    upcoming_events: int
    completion_rate: int
    completed_tasks: int
    total_tasks: int
    user_growth: list[UserGrowthPointItem]
    task_completion: list[TaskCompletionPointItem]
    last_updated: datetime


class UserEngagementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    weekly_engagement: int
    monthly_engagement: int
    active_last_week: int
    active_last_month: int
    average_session_duration: int = Field(..., description="Minutes")
    total_sessions: int
    last_updated: datetime


class ProgramPerformanceItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    status: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    enrollments: int
    completions: int
    completion_rate: int
    rating: int
    last_updated: datetime
