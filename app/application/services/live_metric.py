"""One-shot fetch and push subscription for a single metric family."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from app.application.interfaces.document_store import (
    CollectionQuery,
    IDocumentStore,
    Unsubscribe,
)
from app.application.services.subscription_registry import SubscriptionRegistry
from app.domain.exceptions import AggregationException

logger = logging.getLogger(__name__)

T = TypeVar("T")

UpdateCallback = Callable[[T], "Awaitable[None] | None"]


class LiveMetric(Generic[T]):
    """A metric family (analytics, engagement, programs) in fetch or push mode.

    `compute` builds a fresh snapshot from the store. `trigger` is the query
    whose changes cause a recompute; the recompute always reads the full
    snapshot, never just the changed documents.
    """

    def __init__(
        self,
        family: str,
        compute: Callable[[], Awaitable[T]],
        store: IDocumentStore,
        trigger: CollectionQuery,
        registry: SubscriptionRegistry,
        error_message: str,
    ) -> None:
        self.family = family
        self._compute = compute
        self._store = store
        self._trigger = trigger
        self._registry = registry
        self._error_message = error_message
        self._tasks: set[asyncio.Task] = set()

    async def fetch(self) -> T:
        """Compute one snapshot.

        Raises:
            AggregationException: any unexpected failure, with the family's message.
        """
        try:
            return await self._compute()
        except AggregationException:
            raise
        except Exception as e:
            logger.exception("Error fetching %s metrics", self.family)
            raise AggregationException(self._error_message, family=self.family) from e

    def subscribe(self, on_update: UpdateCallback) -> Unsubscribe:
        """Push a fresh snapshot to on_update now and on every trigger change.

        Must be called from a running event loop. Returns an idempotent
        unsubscribe that detaches the watcher and unregisters it.
        """

        async def push() -> None:
            try:
                snapshot = await self._compute()
                result = on_update(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error pushing %s update", self.family)

        detach = self._store.subscribe(self._trigger, push)
        subscription_id = self._registry.register(self.family, detach)

        task = asyncio.get_running_loop().create_task(push())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        def unsubscribe() -> None:
            self._registry.unregister(subscription_id)

        logger.info("Subscribed to %s updates (%s)", self.family, subscription_id)
        return unsubscribe
