"""Sports analytics use case: regional, level, growth and headline metrics charts."""

from __future__ import annotations

import asyncio
from datetime import tzinfo

from app.application.dtos.analytics import (
    AnalyticsMetrics,
    GrowthData,
    LevelData,
    RegionalData,
    SportsAnalytics,
)
from app.application.dtos.records import (
    AthleteRecord,
    EventRecord,
    TrainingSessionRecord,
)
from app.application.interfaces.document_store import (
    IDocumentStore,
    collection_query,
    where,
)
from app.application.services.decoders import (
    decode_athlete,
    decode_event,
    decode_training_session,
)
from app.application.services.metric_aggregator import (
    LEVEL_COLORS,
    TOP_REGIONS,
    compute_analytics_metrics,
    compute_level_distribution,
    compute_regional_distribution,
)
from app.application.services.query_policies import safe_count, safe_fetch_all
from app.application.services.series_builder import (
    AggregationMode,
    build_monthly_series,
    month_buckets,
)
from app.core.constants import (
    ATHLETE_STATUS_SCOUTED,
    COLLECTION_ATHLETES,
    COLLECTION_EVENTS,
    COLLECTION_PROGRAMS,
    COLLECTION_TRAINING_SESSIONS,
    FIELD_STATUS,
)
from app.domain.enums import AthleteLevel, ProgramStatus
from app.domain.exceptions import AggregationException
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import to_local, utc_now

logger = get_logger(__name__)


class SportsAnalyticsService:
    """Charts for the sports analytics page.

    Every read is fault tolerant (a failed read counts as empty). A failed
    reduction is logged and the single-chart fetchers return an empty or
    zeroed chart; only fetch_all raises AggregationException.
    """

    def __init__(
        self,
        store: IDocumentStore,
        tz: tzinfo,
        growth_months: int = 6,
        top_regions: int = TOP_REGIONS,
    ) -> None:
        self.store = store
        self.tz = tz
        self.growth_months = growth_months
        self.top_regions = top_regions

    async def _athletes(self) -> list[AthleteRecord]:
        docs = await safe_fetch_all(self.store, collection_query(COLLECTION_ATHLETES))
        return [decode_athlete(d) for d in docs]

    async def _events(self) -> list[EventRecord]:
        docs = await safe_fetch_all(self.store, collection_query(COLLECTION_EVENTS))
        return [decode_event(d) for d in docs]

    async def _trainings(self) -> list[TrainingSessionRecord]:
        docs = await safe_fetch_all(
            self.store, collection_query(COLLECTION_TRAINING_SESSIONS)
        )
        return [decode_training_session(d) for d in docs]

    def _growth(
        self,
        athletes: list[AthleteRecord],
        events: list[EventRecord],
        months: int,
    ) -> list[GrowthData]:
        today = to_local(utc_now(), self.tz).date()
        buckets = month_buckets(today, months)
        athlete_series = build_monthly_series(
            buckets, (a.created_at for a in athletes), self.tz, AggregationMode.CUMULATIVE
        )
        event_series = build_monthly_series(
            buckets,
            (e.created_at for e in events),
            self.tz,
            AggregationMode.CUMULATIVE,
        )
        return [
            GrowthData(month=bucket.label, athletes=a, events=e)
            for bucket, a, e in zip(buckets, athlete_series, event_series)
        ]

    async def _metrics(
        self, events: list[EventRecord], athletes: list[AthleteRecord]
    ) -> AnalyticsMetrics:
        scouted, active_programs, trainings = await asyncio.gather(
            safe_count(
                self.store,
                collection_query(
                    COLLECTION_ATHLETES, where(FIELD_STATUS, "==", ATHLETE_STATUS_SCOUTED)
                ),
            ),
            safe_count(
                self.store,
                collection_query(
                    COLLECTION_PROGRAMS,
                    where(FIELD_STATUS, "==", ProgramStatus.ACTIVE.value),
                ),
            ),
            self._trainings(),
        )
        return compute_analytics_metrics(
            events=events,
            total_athletes=len(athletes),
            scouted_athletes=scouted,
            trainings=trainings,
            active_programs=active_programs,
        )

    @traced("sports_analytics.fetch_regional_data")
    async def fetch_regional_data(self) -> list[RegionalData]:
        try:
            athletes, events = await asyncio.gather(self._athletes(), self._events())
            return compute_regional_distribution(athletes, events, limit=self.top_regions)
        except Exception as e:
            logger.exception("Error fetching regional data: %s", e)
            return []

    @traced("sports_analytics.fetch_level_data")
    async def fetch_level_data(self) -> list[LevelData]:
        try:
            return compute_level_distribution(await self._athletes())
        except Exception as e:
            logger.exception("Error fetching level data: %s", e)
            return [
                LevelData(name=level.value, value=0, color=LEVEL_COLORS[level])
                for level in AthleteLevel
            ]

    @traced("sports_analytics.fetch_growth_data")
    async def fetch_growth_data(self, months: int | None = None) -> list[GrowthData]:
        """Cumulative athletes and events for the current and previous months."""
        try:
            athletes, events = await asyncio.gather(self._athletes(), self._events())
            return self._growth(athletes, events, months or self.growth_months)
        except Exception as e:
            logger.exception("Error fetching growth data: %s", e)
            return []

    @traced("sports_analytics.fetch_analytics_metrics")
    async def fetch_analytics_metrics(self) -> AnalyticsMetrics:
        try:
            athletes, events = await asyncio.gather(self._athletes(), self._events())
            return await self._metrics(events, athletes)
        except Exception as e:
            logger.exception("Error fetching analytics metrics: %s", e)
            return AnalyticsMetrics(
                event_attendance_rate=0,
                athletes_scouted=0,
                training_completion=0,
                active_programs=0,
            )

    @traced("sports_analytics.fetch_all")
    async def fetch_all(self) -> SportsAnalytics:
        """All four views from one read of athletes and events."""
        try:
            athletes, events = await asyncio.gather(self._athletes(), self._events())
            metrics = await self._metrics(events, athletes)
            return SportsAnalytics(
                regional_data=compute_regional_distribution(
                    athletes, events, limit=self.top_regions
                ),
                level_data=compute_level_distribution(athletes),
                growth_data=self._growth(athletes, events, self.growth_months),
                metrics=metrics,
                computed_at=utc_now(),
            )
        except Exception as e:
            logger.exception("Error fetching sports analytics")
            raise AggregationException("Failed to fetch sports analytics") from e
