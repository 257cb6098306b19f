"""IDocumentStore implementation over the Firestore REST client.

The REST API has no listen stream usable from plain HTTP clients, so
subscribe() polls the watched query and fires on_change when its
fingerprint (document ids + update times) moves.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.application.interfaces.document_store import (
    ChangeListener,
    CollectionQuery,
    StoredDocument,
    Unsubscribe,
)
from app.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
    Query,
)

logger = logging.getLogger(__name__)

Fingerprint = tuple[tuple[str, str | None, str | None], ...]


def _to_stored(snapshot: DocumentSnapshot) -> StoredDocument:
    return StoredDocument(
        id=snapshot.id,
        fields=snapshot.to_dict(),
        parent_id=snapshot.parent_id,
        update_time=snapshot.update_time,
    )


class FirestoreDocumentStore:
    """Document store backed by Firestore REST v1 (IDocumentStore)."""

    def __init__(self, client: FirestoreRESTClient, poll_interval: float = 5.0) -> None:
        self._client = client
        self.poll_interval = poll_interval
        self._watchers: set[asyncio.Task] = set()
        self._pushes: set[asyncio.Task] = set()

    def _build(self, query: CollectionQuery) -> Query:
        if query.collection_group:
            q = self._client.collection_group(query.collection)
        else:
            q = self._client.collection(query.collection).query()
        for f in query.filters:
            q.where(f.field, f.op, f.value)
        if query.order_by:
            q.order_by(query.order_by, "DESCENDING" if query.descending else "ASCENDING")
        return q.limit(query.limit)

    async def count(self, query: CollectionQuery) -> int:
        return await self._build(query).count()

    async def fetch_all(self, query: CollectionQuery) -> list[StoredDocument]:
        return [_to_stored(s) async for s in self._build(query).stream()]

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        snapshot = await self._client.collection(collection).document(document_id).get()
        return _to_stored(snapshot) if snapshot is not None else None

    async def create(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        await self._client.collection(collection).create(document_id, data)

    async def update(self, collection: str, document_id: str, data: dict[str, Any]) -> bool:
        return await self._client.collection(collection).document(document_id).update(data)

    async def delete(self, collection: str, document_id: str) -> None:
        await self._client.collection(collection).document(document_id).delete()

    async def _fingerprint(self, query: CollectionQuery) -> Fingerprint:
        docs = await self.fetch_all(query)
        return tuple(
            (d.id, d.parent_id, d.update_time.isoformat() if d.update_time else None)
            for d in docs
        )

    async def _deliver(self, collection: str, on_change: ChangeListener) -> None:
        try:
            await on_change()
        except Exception:
            logger.exception("Change listener for %s failed", collection)

    async def _watch(self, query: CollectionQuery, on_change: ChangeListener) -> None:
        """Poll until cancelled. The first successful poll only records the baseline."""
        previous: Fingerprint | None = None
        while True:
            try:
                current = await self._fingerprint(query)
            except Exception as e:
                logger.warning("Watch poll on %s failed: %s", query.collection, e)
            else:
                if previous is not None and current != previous:
                    logger.debug("Change detected on %s", query.collection)
                    push = asyncio.ensure_future(self._deliver(query.collection, on_change))
                    self._pushes.add(push)
                    push.add_done_callback(self._pushes.discard)
                    # Detaching stops the polling loop; a push already running finishes.
                    await asyncio.shield(push)
                previous = current
            await asyncio.sleep(self.poll_interval)

    def subscribe(self, query: CollectionQuery, on_change: ChangeListener) -> Unsubscribe:
        """Start a polling watcher; must be called from a running event loop.

        The returned detach stops future polls only; an in-flight push completes.
        """
        task = asyncio.get_running_loop().create_task(
            self._watch(query, on_change), name=f"watch:{query.collection}"
        )
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)

        def detach() -> None:
            if not task.done():
                task.cancel()

        return detach

    async def aclose(self) -> None:
        """Cancel every watcher and any push still in flight (shutdown)."""
        tasks = [*self._watchers, *self._pushes]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
