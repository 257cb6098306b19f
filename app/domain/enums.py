"""Domain enumerations for the dashboard.

Enums represent fixed sets of domain values stored in documents.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class ProgramStatus(str, Enum):
    """Program lifecycle status (CRUD screens and reports share this set)."""

    DRAFT = "draft"
    UPCOMING = "upcoming"
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def open_values(cls) -> list[str]:
        """Statuses that still count towards pending/overdue work."""
        return [cls.PENDING.value, cls.IN_PROGRESS.value]


class AthleteLevel(str, Enum):
    """Closed set of athlete levels used by the level breakdown chart.

    Stored documents use several spellings; ``parse`` folds them onto the
    three members and falls back to GRASSROOTS for anything else.
    """

    GRASSROOTS = "Grassroots"
    SEMI_PRO = "Semi-Pro"
    PROFESSIONAL = "Professional"

    @classmethod
    def parse(cls, raw: object) -> "AthleteLevel":
        if not isinstance(raw, str):
            return cls.GRASSROOTS
        key = "".join(ch for ch in raw.lower() if ch.isalnum())
        return _LEVEL_ALIASES.get(key, cls.GRASSROOTS)


_LEVEL_ALIASES: dict[str, AthleteLevel] = {
    "grassroots": AthleteLevel.GRASSROOTS,
    "grassroot": AthleteLevel.GRASSROOTS,
    "semipro": AthleteLevel.SEMI_PRO,
    "semiprofessional": AthleteLevel.SEMI_PRO,
    "pro": AthleteLevel.PROFESSIONAL,
    "professional": AthleteLevel.PROFESSIONAL,
}


class ActivityType(str, Enum):
    """Kinds of entries in the recent-activity feed."""

    USER_REGISTERED = "user_registered"
    PROGRAM_CREATED = "program_created"
    EVENT_CREATED = "event_created"
    ATHLETE_ADDED = "athlete_added"
    TRAINING_COMPLETED = "training_completed"
    CONTACT_RECEIVED = "contact_received"


class MetricFamily(str, Enum):
    """Live metric families that support one-shot fetch and subscriptions."""

    ANALYTICS = "analytics"
    ENGAGEMENT = "engagement"
    PROGRAMS = "programs"
