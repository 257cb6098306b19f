"""Pure reductions from decoded records and counts to dashboard snapshots.

Nothing here touches the store; use cases fetch, decode, then call these.
Percentages use round-half-up and are 0 whenever the denominator is 0.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from app.application.dtos.analytics import AnalyticsMetrics, LevelData, RegionalData
from app.application.dtos.dashboard import DashboardStats, RecentActivity
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
from app.application.dtos.reports import ProgramPerformance, UserEngagementMetrics
from app.application.services.decoders import UNKNOWN_REGION
from app.domain.enums import ActivityType, AthleteLevel

TOP_REGIONS = 10

LEVEL_COLORS: dict[AthleteLevel, str] = {
    AthleteLevel.GRASSROOTS: "#8884d8",
    AthleteLevel.SEMI_PRO: "#82ca9d",
    AthleteLevel.PROFESSIONAL: "#ffc658",
}

# Keys of the dashboard count batch, in stat-card order.
DASHBOARD_COUNT_KEYS = (
    "users",
    "active_programs",
    "events",
    "upcoming_events",
    "tasks",
    "completed_tasks",
    "certificates",
    "admissions",
    "blog_posts",
    "athletes",
    "scouted_athletes",
    "training_programs",
    "recent_registrations",
    "contact_submissions",
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def compute_percentage(numerator: int, denominator: int) -> int:
    """Return round(numerator / denominator * 100) as an int; 0 when denominator is 0."""
    if not denominator:
        return 0
    if isinstance(numerator, int) and isinstance(denominator, int) and denominator > 0:
        # Exact integer rounding; 1/8 -> 13, 1/2 -> 50.
        return (200 * numerator + denominator) // (2 * denominator)
    return round_half_up(numerator * 100 / denominator)


def _count(counts: Mapping[str, object], key: str) -> int:
    value = counts[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Count {key!r} is not an integer: {value!r}")
    return value


def compute_dashboard_stats(
    counts: Mapping[str, object], computed_at: datetime
) -> DashboardStats:
    """Reduce the dashboard count batch into stat cards.

    Upcoming events fall back to the total event count when no event is
    future-dated, so an event collection with only past events never shows 0.

    Raises:
        KeyError / TypeError: when a count is missing or not an integer.
    """
    total_events = _count(counts, "events")
    upcoming = _count(counts, "upcoming_events")
    if upcoming == 0:
        upcoming = total_events
    return DashboardStats(
        total_users=_count(counts, "users"),
        active_programs=_count(counts, "active_programs"),
        upcoming_events=upcoming,
        tasks_completed=compute_percentage(
            _count(counts, "completed_tasks"), _count(counts, "tasks")
        ),
        total_certificates=_count(counts, "certificates"),
        total_admissions=_count(counts, "admissions"),
        total_blog_posts=_count(counts, "blog_posts"),
        total_athletes=_count(counts, "athletes"),
        scouted_athletes=_count(counts, "scouted_athletes"),
        active_training_programs=_count(counts, "training_programs"),
        recent_registrations=_count(counts, "recent_registrations"),
        contact_submissions=_count(counts, "contact_submissions"),
        computed_at=computed_at,
    )


def partial_dashboard_stats(
    counts: Mapping[str, object], computed_at: datetime
) -> DashboardStats:
    """Best-effort stats when the full reduction failed.

    Plain counts are copied when present and integral, 0 otherwise; the
    derived fields (task completion, upcoming events) are 0.
    """

    def present(key: str) -> int:
        value = counts.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    return DashboardStats(
        total_users=present("users"),
        active_programs=present("active_programs"),
        upcoming_events=0,
        tasks_completed=0,
        total_certificates=present("certificates"),
        total_admissions=present("admissions"),
        total_blog_posts=present("blog_posts"),
        total_athletes=present("athletes"),
        scouted_athletes=present("scouted_athletes"),
        active_training_programs=present("training_programs"),
        recent_registrations=present("recent_registrations"),
        contact_submissions=present("contact_submissions"),
        computed_at=computed_at,
        partial=True,
    )


def compute_regional_distribution(
    athletes: Iterable[AthleteRecord],
    events: Iterable[EventRecord],
    limit: int = TOP_REGIONS,
) -> list[RegionalData]:
    """Athlete and event counts per region, most athletes first, top `limit`.

    Ties keep first-seen order (athletes are scanned before events), so a
    region with events but no athletes sorts after every region with athletes.
    """
    buckets: dict[str, list[int]] = {}
    for athlete in athletes:
        buckets.setdefault(athlete.location or UNKNOWN_REGION, [0, 0])[0] += 1
    for event in events:
        buckets.setdefault(event.location or UNKNOWN_REGION, [0, 0])[1] += 1

    rows = [
        RegionalData(region=region, athlete_count=a, event_count=e)
        for region, (a, e) in buckets.items()
    ]
    rows.sort(key=lambda row: row.athlete_count, reverse=True)
    return rows[:limit]


def compute_level_distribution(athletes: Iterable[AthleteRecord]) -> list[LevelData]:
    """Exactly three buckets (Grassroots, Semi-Pro, Professional) summing to len(athletes)."""
    counts = Counter(athlete.level for athlete in athletes)
    return [
        LevelData(name=level.value, value=counts.get(level, 0), color=LEVEL_COLORS[level])
        for level in AthleteLevel
    ]


def compute_event_attendance_rate(events: Iterable[EventRecord]) -> int:
    """Registrations over capacity across events that declare a capacity."""
    registrations = 0
    capacity = 0
    for event in events:
        if event.capacity > 0:
            capacity += event.capacity
            registrations += min(event.registrations, event.capacity)
    return compute_percentage(registrations, capacity)


def compute_training_completion(trainings: Sequence[TrainingSessionRecord]) -> int:
    completed = sum(1 for t in trainings if t.status == "completed")
    return compute_percentage(completed, len(trainings))


def compute_analytics_metrics(
    *,
    events: Sequence[EventRecord],
    total_athletes: int,
    scouted_athletes: int,
    trainings: Sequence[TrainingSessionRecord],
    active_programs: int,
) -> AnalyticsMetrics:
    return AnalyticsMetrics(
        event_attendance_rate=compute_event_attendance_rate(events),
        athletes_scouted=compute_percentage(scouted_athletes, total_athletes),
        training_completion=compute_training_completion(trainings),
        active_programs=active_programs,
    )


def compute_program_performance(
    programs: Sequence[ProgramRecord],
    enrollments: Iterable[ChildRecord],
    completions: Iterable[ChildRecord],
    computed_at: datetime,
) -> list[ProgramPerformance]:
    """Join programs with enrollment/completion counts keyed by parent program id.

    Output keeps the order of `programs`. Children with no parent id are
    dropped; programs with no children get explicit zeros.
    """
    enrollments_by_program = Counter(c.parent_id for c in enrollments if c.parent_id)
    completions_by_program = Counter(c.parent_id for c in completions if c.parent_id)

    results: list[ProgramPerformance] = []
    for program in programs:
        enrolled = enrollments_by_program.get(program.id, 0)
        completed = completions_by_program.get(program.id, 0)
        results.append(
            ProgramPerformance(
                id=program.id,
                name=program.name,
                status=program.status,
                start_date=program.start_date,
                end_date=program.end_date,
                enrollments=enrolled,
                completions=completed,
                completion_rate=compute_percentage(completed, enrolled),
                rating=0,
                last_updated=computed_at,
            )
        )
    return results


def compute_engagement(
    *,
    active_last_week: int,
    active_last_month: int,
    total_users: int,
    sessions: Sequence[SessionRecord],
    computed_at: datetime,
) -> UserEngagementMetrics:
    """Engagement percentages (capped at 100) and average session length in minutes."""
    total_sessions = len(sessions)
    total_duration = sum(s.duration_seconds for s in sessions)
    average_minutes = (
        round_half_up(total_duration / total_sessions / 60) if total_sessions else 0
    )
    return UserEngagementMetrics(
        weekly_engagement=min(100, compute_percentage(active_last_week, total_users)),
        monthly_engagement=min(100, compute_percentage(active_last_month, total_users)),
        active_last_week=active_last_week,
        active_last_month=active_last_month,
        average_session_duration=average_minutes,
        total_sessions=total_sessions,
        last_updated=computed_at,
    )


def format_time_ago(timestamp: datetime, now: datetime) -> str:
    """Short relative label for the activity feed."""
    seconds = int((now - timestamp).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    if seconds < 604800:
        return f"{seconds // 86400} days ago"
    return timestamp.strftime("%Y-%m-%d")


def build_recent_activity(
    *,
    users: Iterable[UserRecord],
    programs: Iterable[ProgramRecord],
    events: Iterable[EventRecord],
    athletes: Iterable[AthleteRecord],
    trainings: Iterable[TrainingSessionRecord],
    contacts: Iterable[ContactRecord],
    now: datetime,
    limit: int,
) -> list[RecentActivity]:
    """Merge the per-kind feeds, newest first, truncated to `limit`.

    Documents with no timestamp are stamped with `now`.
    """
    entries: list[tuple[str, ActivityType, str, datetime | None, str | None]] = []
    for u in users:
        entries.append((
            f"user_{u.id}",
            ActivityType.USER_REGISTERED,
            f"New user {u.display_name} registered",
            u.created_at,
            u.display_name,
        ))
    for p in programs:
        entries.append((
            f"program_{p.id}",
            ActivityType.PROGRAM_CREATED,
            f'New program "{p.name}" created',
            p.created_at,
            None,
        ))
    for e in events:
        entries.append((
            f"event_{e.id}",
            ActivityType.EVENT_CREATED,
            f'New event "{e.title}" scheduled',
            e.created_at or e.start_date,
            None,
        ))
    for a in athletes:
        entries.append((
            f"athlete_{a.id}",
            ActivityType.ATHLETE_ADDED,
            f"New athlete {a.full_name} added",
            a.created_at,
            None,
        ))
    for t in trainings:
        entries.append((
            f"training_{t.id}",
            ActivityType.TRAINING_COMPLETED,
            f"Training session completed: {t.title}",
            t.start_date,
            None,
        ))
    for c in contacts:
        entries.append((
            f"contact_{c.id}",
            ActivityType.CONTACT_RECEIVED,
            f"New contact from {c.name}: {c.subject}",
            c.created_at,
            None,
        ))

    activities = [
        RecentActivity(
            id=activity_id,
            type=kind,
            description=description,
            timestamp=ts or now,
            time_ago=format_time_ago(ts or now, now),
            user=user,
        )
        for activity_id, kind, description, ts, user in entries
    ]
    activities.sort(key=lambda a: a.timestamp, reverse=True)
    return activities[:limit]
