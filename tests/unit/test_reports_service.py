"""ReportsService: analytics, engagement and program performance families."""

import asyncio
from datetime import datetime, time, timedelta, timezone

import pytest

from app.application.services.subscription_registry import SubscriptionRegistry
from app.application.use_cases.reports import ReportsService
from app.domain.enums import MetricFamily
from app.domain.exceptions import AggregationException
from app.shared.utils.datetime import utc_now
from tests.fakes import InMemoryDocumentStore

UTC = timezone.utc


def _noon(days_ago: int) -> datetime:
    day = utc_now().date() - timedelta(days=days_ago)
    return datetime.combine(day, time(12, 0), tzinfo=UTC)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    store = InMemoryDocumentStore()
    now = utc_now()

    store.add("users", "u1", {"createdAt": _noon(2), "lastActiveAt": now - timedelta(days=1), "status": "active"})
    store.add("users", "u2", {"createdAt": _noon(0), "lastActiveAt": now - timedelta(days=1), "status": "inactive"})
    store.add("users", "u3", {"createdAt": _noon(10), "status": "active"})

    store.add("tasks", "t1", {"status": "completed", "completedAt": _noon(1)})
    store.add("tasks", "t2", {"status": "pending", "dueDate": _noon(0)})
    store.add("tasks", "t3", {"status": "in-progress", "dueDate": _noon(10)})
    store.add("tasks", "t4", {"status": "cancelled", "dueDate": _noon(2)})

    store.add("programs", "p1", {"name": "Alpha", "status": "active", "createdAt": now - timedelta(days=1)})
    store.add("programs", "p2", {"name": "Beta", "status": "draft", "createdAt": now - timedelta(days=2)})
    store.add("enrollments", "en1", parent_id="p1")
    store.add("enrollments", "en2", parent_id="p1")
    store.add("enrollments", "en3", parent_id="p2")
    store.add("completions", "c1", parent_id="p1")

    store.add("events", "e1", {"startDate": now + timedelta(days=1)})
    store.add("events", "e2", {"startDate": now - timedelta(days=1)})

    store.add("sessions", "s1", {"endTime": now - timedelta(days=1), "duration": 600}, parent_id="u1")
    store.add("sessions", "s2", {"endTime": now - timedelta(days=2), "duration": 1200}, parent_id="u1")
    store.add("sessions", "s3", {"endTime": now - timedelta(days=60), "duration": 9000}, parent_id="u3")
    return store


@pytest.fixture
def registry() -> SubscriptionRegistry:
    return SubscriptionRegistry()


@pytest.fixture
def service(store: InMemoryDocumentStore, registry: SubscriptionRegistry) -> ReportsService:
    return ReportsService(store, registry, tz=UTC, user_growth_days=3)


async def test_analytics_totals(service: ReportsService) -> None:
    data = await service.get_analytics_data()
    assert data.total_users == 3
    assert data.active_users == 1
    assert data.total_programs == 2
    assert data.active_programs == 1
    assert data.total_events == 2
    assert data.upcoming_events == 1
    assert data.total_tasks == 4
    assert data.completed_tasks == 1
    assert data.completion_rate == 25


async def test_analytics_daily_series(service: ReportsService) -> None:
    data = await service.get_analytics_data()
    today = utc_now().date()
    expected_days = [(today - timedelta(days=n)).isoformat() for n in (2, 1, 0)]

    assert [p.date for p in data.user_growth] == expected_days
    assert [p.total_users for p in data.user_growth] == [2, 2, 3]
    assert [p.new_users for p in data.user_growth] == [1, 0, 1]

    assert [p.date for p in data.task_completion] == expected_days
    assert [p.completed for p in data.task_completion] == [0, 1, 0]
    assert [p.pending for p in data.task_completion] == [0, 0, 1]
    assert [p.overdue for p in data.task_completion] == [1, 1, 1]


async def test_analytics_failure_is_generic(store: InMemoryDocumentStore, service: ReportsService) -> None:
    store.fail("tasks")
    with pytest.raises(AggregationException) as exc_info:
        await service.get_analytics_data()
    assert exc_info.value.message == "Failed to fetch analytics data"


async def test_engagement_metrics(service: ReportsService) -> None:
    metrics = await service.get_user_engagement_metrics()
    assert metrics.active_last_week == 1
    assert metrics.active_last_month == 1
    assert metrics.weekly_engagement == 33
    assert metrics.total_sessions == 2
    assert metrics.average_session_duration == 15


async def test_engagement_failure_is_generic(store: InMemoryDocumentStore, service: ReportsService) -> None:
    store.fail("sessions")
    with pytest.raises(AggregationException) as exc_info:
        await service.get_user_engagement_metrics()
    assert exc_info.value.message == "Failed to fetch user engagement metrics"


async def test_program_performance(service: ReportsService) -> None:
    rows = await service.get_program_performance_metrics()
    assert [(r.id, r.enrollments, r.completions, r.completion_rate) for r in rows] == [
        ("p1", 2, 1, 50),
        ("p2", 1, 0, 0),
    ]
    assert rows[0].name == "Alpha"
    assert rows[0].status == "active"


async def test_program_performance_failure_is_generic(
    store: InMemoryDocumentStore, service: ReportsService
) -> None:
    store.fail("enrollments")
    with pytest.raises(AggregationException) as exc_info:
        await service.get_program_performance_metrics()
    assert exc_info.value.message == "Failed to fetch program performance metrics"


async def test_subscribe_pushes_initial_and_changed_snapshots(
    store: InMemoryDocumentStore, registry: SubscriptionRegistry, service: ReportsService
) -> None:
    received: list = []
    first = asyncio.Event()

    def on_update(snapshot) -> None:
        received.append(snapshot)
        first.set()

    unsubscribe = service.subscribe(MetricFamily.PROGRAMS, on_update)
    await asyncio.wait_for(first.wait(), timeout=2)
    assert len(received) == 1
    assert len(received[0]) == 2

    store.add("programs", "p3", {"name": "Gamma", "status": "active", "createdAt": utc_now()})
    await store.trigger("programs")
    assert len(received) == 2
    assert [r.id for r in received[1]] == ["p3", "p1", "p2"]

    unsubscribe()
    assert len(registry) == 0
    assert store.listener_count == 0


async def test_each_family_watches_its_trigger(
    store: InMemoryDocumentStore, registry: SubscriptionRegistry, service: ReportsService
) -> None:
    unsubscribers = [service.subscribe(family, lambda snapshot: None) for family in MetricFamily]
    assert len(registry) == 3
    assert store.listener_count == 3
    for unsubscribe in unsubscribers:
        unsubscribe()
    assert store.listener_count == 0
