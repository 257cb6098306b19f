"""Registry of live metric subscriptions and their teardown handles.

Owned by the application (created in the lifespan, stored on app.state) and
injected into every LiveMetric, so shutdown can release whatever is still
attached.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Maps subscription id -> teardown callable.

    All mutations go through one lock; teardowns run outside it so a slow
    or re-entrant teardown cannot block other registrations.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, Callable[[], None]] = {}
        self._lock = threading.Lock()

    def register(self, family: str, teardown: Callable[[], None]) -> str:
        """Store a teardown and return its new subscription id ("<family>-<ns>")."""
        with self._lock:
            stamp = time.time_ns()
            subscription_id = f"{family}-{stamp}"
            while subscription_id in self._subscriptions:
                stamp += 1
                subscription_id = f"{family}-{stamp}"
            self._subscriptions[subscription_id] = teardown
        logger.debug("Registered subscription %s", subscription_id)
        return subscription_id

    def unregister(self, subscription_id: str) -> bool:
        """Run and drop the teardown for an id. Unknown ids are a no-op returning False."""
        with self._lock:
            teardown = self._subscriptions.pop(subscription_id, None)
        if teardown is None:
            return False
        teardown()
        logger.debug("Unregistered subscription %s", subscription_id)
        return True

    def teardown_all(self) -> int:
        """Release every remaining subscription; returns how many were released.

        A failing teardown is logged and does not stop the others.
        """
        with self._lock:
            pending = list(self._subscriptions.items())
            self._subscriptions.clear()
        for subscription_id, teardown in pending:
            try:
                teardown()
            except Exception:
                logger.exception("Teardown failed for subscription %s", subscription_id)
        if pending:
            logger.info("Released %d live subscription(s)", len(pending))
        return len(pending)

    def active_ids(self) -> list[str]:
        with self._lock:
            return list(self._subscriptions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)
