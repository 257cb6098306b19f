"""DTOs for the admin dashboard overview (stat cards and activity feed)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import ActivityType


@dataclass
class DashboardStats:
    """Stat-card counts for the dashboard overview.

    tasks_completed is a percentage (0..100), every other field is a count.
    """

    # General
    total_users: int
    active_programs: int
    upcoming_events: int
    tasks_completed: int
    total_certificates: int
    total_admissions: int
    total_blog_posts: int
    # Sports
    total_athletes: int
    scouted_athletes: int
    active_training_programs: int
    recent_registrations: int
    contact_submissions: int
    computed_at: datetime
    partial: bool = False


@dataclass
class RecentActivity:
    """One entry in the recent-activity feed."""

    id: str
    type: ActivityType
    description: str
    timestamp: datetime
    time_ago: str
    user: str | None = None
