"""Reports page use case: live analytics, engagement and program performance.

Each family is a LiveMetric: fetch once, or subscribe for pushes driven by a
cheap trigger query. Unlike the dashboard, report reads are not individually
fault tolerant; any failed query fails the whole snapshot.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from datetime import timedelta, tzinfo

from app.application.dtos.records import ChildRecord
from app.application.dtos.reports import (
    AnalyticsData,
    ProgramPerformance,
    TaskCompletionPoint,
    UserEngagementMetrics,
    UserGrowthPoint,
)
from app.application.interfaces.document_store import (
    IDocumentStore,
    Unsubscribe,
    collection_query,
    where,
)
from app.application.services.decoders import decode_child, decode_program, decode_session
from app.application.services.live_metric import LiveMetric, UpdateCallback
from app.application.services.metric_aggregator import (
    compute_engagement,
    compute_percentage,
    compute_program_performance,
)
from app.application.services.series_builder import (
    AggregationMode,
    DayWindow,
    SeriesMetric,
    build_daily_series,
)
from app.application.services.subscription_registry import SubscriptionRegistry
from app.core.constants import (
    COLLECTION_EVENTS,
    COLLECTION_PROGRAMS,
    COLLECTION_TASKS,
    COLLECTION_USERS,
    FIELD_COMPLETED_AT,
    FIELD_CREATED_AT,
    FIELD_DUE_DATE,
    FIELD_END_TIME,
    FIELD_LAST_ACTIVE_AT,
    FIELD_START_DATE,
    FIELD_STATUS,
    GROUP_ANALYTICS,
    GROUP_COMPLETIONS,
    GROUP_ENROLLMENTS,
    GROUP_SESSIONS,
)
from app.domain.enums import MetricFamily, ProgramStatus, TaskStatus, UserStatus
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import to_local, utc_now

logger = get_logger(__name__)

WEEK = timedelta(days=7)
MONTH = timedelta(days=30)


class ReportsService:
    """Entry points for the three report families."""

    def __init__(
        self,
        store: IDocumentStore,
        registry: SubscriptionRegistry,
        tz: tzinfo,
        user_growth_days: int = 30,
    ) -> None:
        self.store = store
        self.registry = registry
        self.tz = tz
        self.user_growth_days = user_growth_days

        self.analytics = LiveMetric(
            MetricFamily.ANALYTICS.value,
            self._compute_analytics,
            store,
            collection_query(GROUP_ANALYTICS, limit=1, collection_group=True),
            registry,
            "Failed to fetch analytics data",
        )
        self.engagement = LiveMetric(
            MetricFamily.ENGAGEMENT.value,
            self._compute_engagement,
            store,
            collection_query(GROUP_SESSIONS, limit=1, collection_group=True),
            registry,
            "Failed to fetch user engagement metrics",
        )
        self.programs = LiveMetric(
            MetricFamily.PROGRAMS.value,
            self._compute_program_performance,
            store,
            collection_query(COLLECTION_PROGRAMS, limit=1, collection_group=True),
            registry,
            "Failed to fetch program performance metrics",
        )

    def metric(self, family: MetricFamily) -> LiveMetric:
        return {
            MetricFamily.ANALYTICS: self.analytics,
            MetricFamily.ENGAGEMENT: self.engagement,
            MetricFamily.PROGRAMS: self.programs,
        }[family]

    # ---- analytics ----

    def _count(self, collection: str, *filters) -> Awaitable[int]:
        return self.store.count(collection_query(collection, *filters))

    def _user_growth_metrics(self) -> list[SeriesMetric]:
        async def total_users(window: DayWindow) -> int:
            return await self._count(
                COLLECTION_USERS, where(FIELD_CREATED_AT, "<=", window.end)
            )

        async def new_users(window: DayWindow) -> int:
            return await self._count(
                COLLECTION_USERS,
                where(FIELD_CREATED_AT, ">=", window.start),
                where(FIELD_CREATED_AT, "<=", window.end),
            )

        return [SeriesMetric("total_users", total_users), SeriesMetric("new_users", new_users)]

    def _task_metrics(self) -> list[SeriesMetric]:
        open_statuses = TaskStatus.open_values()

        async def completed(window: DayWindow) -> int:
            return await self._count(
                COLLECTION_TASKS,
                where(FIELD_STATUS, "==", TaskStatus.COMPLETED.value),
                where(FIELD_COMPLETED_AT, ">=", window.start),
                where(FIELD_COMPLETED_AT, "<=", window.end),
            )

        async def pending(window: DayWindow) -> int:
            return await self._count(
                COLLECTION_TASKS,
                where(FIELD_STATUS, "in", open_statuses),
                where(FIELD_DUE_DATE, ">=", window.start),
                where(FIELD_DUE_DATE, "<=", window.end),
            )

        async def overdue(window: DayWindow) -> int:
            return await self._count(
                COLLECTION_TASKS,
                where(FIELD_STATUS, "in", open_statuses),
                where(FIELD_DUE_DATE, "<", window.start),
            )

        return [
            SeriesMetric("completed", completed, AggregationMode.PER_BUCKET),
            SeriesMetric("pending", pending, AggregationMode.PER_BUCKET),
            SeriesMetric("overdue", overdue, AggregationMode.PER_BUCKET),
        ]

    async def _compute_analytics(self) -> AnalyticsData:
        now = utc_now()
        (
            users,
            active_users,
            programs,
            active_programs,
            events,
            upcoming_events,
            tasks,
            completed_tasks,
        ) = await asyncio.gather(
            self._count(COLLECTION_USERS),
            self._count(
                COLLECTION_USERS,
                where(FIELD_LAST_ACTIVE_AT, ">=", now - MONTH),
                where(FIELD_STATUS, "==", UserStatus.ACTIVE.value),
            ),
            self._count(COLLECTION_PROGRAMS),
            self._count(
                COLLECTION_PROGRAMS, where(FIELD_STATUS, "==", ProgramStatus.ACTIVE.value)
            ),
            self._count(COLLECTION_EVENTS),
            self._count(COLLECTION_EVENTS, where(FIELD_START_DATE, ">=", now)),
            self._count(COLLECTION_TASKS),
            self._count(
                COLLECTION_TASKS, where(FIELD_STATUS, "==", TaskStatus.COMPLETED.value)
            ),
        )

        today = to_local(now, self.tz).date()
        first_day = today - timedelta(days=self.user_growth_days - 1)
        growth, task_trend = await asyncio.gather(
            build_daily_series(first_day, today, self._user_growth_metrics(), self.tz),
            build_daily_series(first_day, today, self._task_metrics(), self.tz),
        )

        return AnalyticsData(
            total_users=users,
            active_users=active_users,
            total_programs=programs,
            active_programs=active_programs,
            total_events=events,
            upcoming_events=upcoming_events,
            completion_rate=compute_percentage(completed_tasks, tasks),
            completed_tasks=completed_tasks,
            total_tasks=tasks,
            user_growth=[
                UserGrowthPoint(
                    date=p.date,
                    total_users=p.values["total_users"],
                    new_users=p.values["new_users"],
                )
                for p in growth
            ],
            task_completion=[
                TaskCompletionPoint(
                    date=p.date,
                    completed=p.values["completed"],
                    pending=p.values["pending"],
                    overdue=p.values["overdue"],
                )
                for p in task_trend
            ],
            last_updated=utc_now(),
        )

    # ---- engagement ----

    async def _compute_engagement(self) -> UserEngagementMetrics:
        now = utc_now()
        active_week, active_month, total_users, session_docs = await asyncio.gather(
            self._count(
                COLLECTION_USERS,
                where(FIELD_LAST_ACTIVE_AT, ">=", now - WEEK),
                where(FIELD_STATUS, "==", UserStatus.ACTIVE.value),
            ),
            self._count(
                COLLECTION_USERS,
                where(FIELD_LAST_ACTIVE_AT, ">=", now - MONTH),
                where(FIELD_STATUS, "==", UserStatus.ACTIVE.value),
            ),
            self._count(COLLECTION_USERS),
            self.store.fetch_all(
                collection_query(
                    GROUP_SESSIONS,
                    where(FIELD_END_TIME, ">=", now - MONTH),
                    order_by=FIELD_END_TIME,
                    descending=True,
                )
            ),
        )
        return compute_engagement(
            active_last_week=active_week,
            active_last_month=active_month,
            total_users=total_users,
            sessions=[decode_session(d) for d in session_docs],
            computed_at=utc_now(),
        )

    # ---- program performance ----

    async def _compute_program_performance(self) -> list[ProgramPerformance]:
        program_docs, enrollment_docs, completion_docs = await asyncio.gather(
            self.store.fetch_all(
                collection_query(
                    COLLECTION_PROGRAMS, order_by=FIELD_CREATED_AT, descending=True
                )
            ),
            self.store.fetch_all(
                collection_query(GROUP_ENROLLMENTS, collection_group=True)
            ),
            self.store.fetch_all(
                collection_query(GROUP_COMPLETIONS, collection_group=True)
            ),
        )
        enrollments: list[ChildRecord] = [decode_child(d) for d in enrollment_docs]
        completions: list[ChildRecord] = [decode_child(d) for d in completion_docs]
        return compute_program_performance(
            [decode_program(d) for d in program_docs],
            enrollments,
            completions,
            utc_now(),
        )

    # ---- entry points ----

    @traced("reports.get_analytics_data")
    async def get_analytics_data(self) -> AnalyticsData:
        return await self.analytics.fetch()

    @traced("reports.get_user_engagement_metrics")
    async def get_user_engagement_metrics(self) -> UserEngagementMetrics:
        return await self.engagement.fetch()

    @traced("reports.get_program_performance_metrics")
    async def get_program_performance_metrics(self) -> list[ProgramPerformance]:
        return await self.programs.fetch()

    def subscribe(self, family: MetricFamily, on_update: UpdateCallback) -> Unsubscribe:
        """Push mode for one family; see LiveMetric.subscribe."""
        return self.metric(family).subscribe(on_update)
