"""Dashboard overview API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import ActivityType


class DashboardStatsResponse(BaseModel):
    """Stat cards for the admin overview. tasks_completed is a percentage."""

    model_config = ConfigDict(from_attributes=True)

    total_users: int
    active_programs: int
    upcoming_events: int
    tasks_completed: int = Field(..., ge=0, le=100)
    total_certificates: int
    total_admissions: int
    total_blog_posts: int
    total_athletes: int
    scouted_athletes: int
    active_training_programs: int
    recent_registrations: int
    contact_submissions: int
    computed_at: datetime
    partial: bool = Field(
        default=False,
        description="True when some values could not be reduced and were reported as 0",
    )


class RecentActivityItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: ActivityType
    description: str
    timestamp: datetime
    time_ago: str
    user: str | None = None
