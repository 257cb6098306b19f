"""Dashboard overview use case: stat cards and the recent-activity feed."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from datetime import timedelta

from app.application.dtos.dashboard import DashboardStats, RecentActivity
from app.application.interfaces.document_store import (
    CollectionQuery,
    IDocumentStore,
    StoredDocument,
    collection_query,
    where,
)
from app.application.services.decoders import (
    decode_athlete,
    decode_contact,
    decode_event,
    decode_program,
    decode_training_session,
    decode_user,
)
from app.application.services.metric_aggregator import (
    build_recent_activity,
    compute_dashboard_stats,
    partial_dashboard_stats,
)
from app.application.services.query_policies import (
    FirstSuccessPolicy,
    collection_count_policy,
    safe_count,
    safe_fetch_all,
)
from app.core.constants import (
    ATHLETE_STATUS_SCOUTED,
    COLLECTION_ADMISSIONS,
    COLLECTION_ATHLETES,
    COLLECTION_BLOG_POSTS,
    COLLECTION_CERTIFICATES,
    COLLECTION_EVENTS,
    COLLECTION_PROGRAMS,
    COLLECTION_TASKS,
    COLLECTION_TRAINING_SESSIONS,
    COLLECTION_USERS,
    FIELD_CREATED_AT,
    FIELD_START_DATE,
    FIELD_STATUS,
    FIELD_TYPE,
    PROGRAM_TYPE_TRAINING,
)
from app.domain.enums import ProgramStatus, TaskStatus
from app.domain.exceptions import AggregationException
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

# Newest documents read per feed before merging.
FEED_DEPTH = 3


class DashboardService:
    """Stat cards and activity feed for the admin overview page."""

    def __init__(
        self,
        store: IDocumentStore,
        contact_collections: Sequence[str],
        recent_registration_days: int = 7,
        recent_activity_limit: int = 10,
    ) -> None:
        self.store = store
        self.contact_collections = list(contact_collections)
        self.recent_registration_days = recent_registration_days
        self.recent_activity_limit = recent_activity_limit

    def _count_batch(self) -> dict[str, Awaitable[int]]:
        now = utc_now()
        registrations_since = now - timedelta(days=self.recent_registration_days)
        contacts = collection_count_policy(
            "contact-submissions", self.store, self.contact_collections
        )

        def count(collection: str, *filters) -> Awaitable[int]:
            return safe_count(self.store, collection_query(collection, *filters))

        return {
            "users": count(COLLECTION_USERS),
            "active_programs": count(
                COLLECTION_PROGRAMS, where(FIELD_STATUS, "==", ProgramStatus.ACTIVE.value)
            ),
            "events": count(COLLECTION_EVENTS),
            "upcoming_events": count(COLLECTION_EVENTS, where(FIELD_START_DATE, ">=", now)),
            "tasks": count(COLLECTION_TASKS),
            "completed_tasks": count(
                COLLECTION_TASKS, where(FIELD_STATUS, "==", TaskStatus.COMPLETED.value)
            ),
            "certificates": count(COLLECTION_CERTIFICATES),
            "admissions": count(COLLECTION_ADMISSIONS),
            "blog_posts": count(COLLECTION_BLOG_POSTS),
            "athletes": count(COLLECTION_ATHLETES),
            "scouted_athletes": count(
                COLLECTION_ATHLETES, where(FIELD_STATUS, "==", ATHLETE_STATUS_SCOUTED)
            ),
            "training_programs": count(
                COLLECTION_PROGRAMS,
                where(FIELD_TYPE, "==", PROGRAM_TYPE_TRAINING),
            ),
            "recent_registrations": count(
                COLLECTION_USERS, where(FIELD_CREATED_AT, ">=", registrations_since)
            ),
            "contact_submissions": contacts.resolve(),
        }

    @traced("dashboard.fetch_dashboard_stats")
    async def fetch_dashboard_stats(self) -> DashboardStats:
        """Run every count concurrently and reduce them into stat cards.

        Failed counts read as 0. A failure while reducing yields a partial
        snapshot (partial=True). Anything else raises AggregationException.
        """
        try:
            batch = self._count_batch()
            results = await asyncio.gather(*batch.values())
            counts = dict(zip(batch.keys(), results))
            computed_at = utc_now()
            try:
                return compute_dashboard_stats(counts, computed_at)
            except Exception:
                logger.exception("Error reducing dashboard counts, returning partial stats")
                return partial_dashboard_stats(counts, computed_at)
        except Exception as e:
            logger.exception("Error fetching dashboard stats")
            raise AggregationException("Failed to fetch dashboard statistics") from e

    def _recent(self, collection: str, order_field: str = FIELD_CREATED_AT) -> CollectionQuery:
        return collection_query(
            collection, order_by=order_field, descending=True, limit=FEED_DEPTH
        )

    def _recent_contacts(self) -> FirstSuccessPolicy[list[StoredDocument]]:
        def resolver(collection: str):
            return lambda: self.store.fetch_all(self._recent(collection))

        return FirstSuccessPolicy(
            "recent-contacts",
            [(name, resolver(name)) for name in self.contact_collections],
            default=[],
        )

    @traced("dashboard.fetch_recent_activity")
    async def fetch_recent_activity(self, limit: int | None = None) -> list[RecentActivity]:
        """Newest entries across users, programs, events, athletes, training and contacts.

        Never raises: an unexpected failure is logged and yields [].
        """
        limit = limit if limit is not None else self.recent_activity_limit
        try:
            users, programs, events, athletes, trainings, contacts = await asyncio.gather(
                safe_fetch_all(self.store, self._recent(COLLECTION_USERS)),
                safe_fetch_all(self.store, self._recent(COLLECTION_PROGRAMS)),
                safe_fetch_all(self.store, self._recent(COLLECTION_EVENTS)),
                safe_fetch_all(self.store, self._recent(COLLECTION_ATHLETES)),
                safe_fetch_all(
                    self.store, self._recent(COLLECTION_TRAINING_SESSIONS, FIELD_START_DATE)
                ),
                self._recent_contacts().resolve(),
            )
            return build_recent_activity(
                users=[decode_user(d) for d in users],
                programs=[decode_program(d) for d in programs],
                events=[decode_event(d) for d in events],
                athletes=[decode_athlete(d) for d in athletes],
                trainings=[decode_training_session(d) for d in trainings],
                contacts=[decode_contact(d) for d in contacts],
                now=utc_now(),
                limit=limit,
            )
        except Exception:
            logger.exception("Error fetching recent activity")
            return []
