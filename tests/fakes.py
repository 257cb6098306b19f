"""In-memory IDocumentStore for unit and API tests.

Evaluates filters, ordering, limits and collection groups the way Firestore
does for the operators the app uses: a document missing a filtered or
ordered field never matches.
"""

from __future__ import annotations

import asyncio
import operator
from datetime import datetime, timezone
from typing import Any

from app.application.interfaces.document_store import (
    ChangeListener,
    CollectionQuery,
    FieldFilter,
    StoredDocument,
    Unsubscribe,
)
from app.shared.utils.datetime import utc_now

_COMPARE = {
    "==": operator.eq,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}

_MISSING = object()


class StoreFailure(RuntimeError):
    """Raised for collections configured to fail."""


def _matches(fields: dict[str, Any], f: FieldFilter) -> bool:
    value = fields.get(f.field, _MISSING)
    if value is _MISSING:
        return False
    if f.op == "in":
        return value in f.value
    try:
        return bool(_COMPARE[f.op](value, f.value))
    except TypeError:
        return False


class InMemoryDocumentStore:
    """Documents keyed by (collection id, parent document id)."""

    def __init__(self, count_delay: float = 0.0) -> None:
        self._docs: dict[tuple[str, str | None], dict[str, StoredDocument]] = {}
        self._listeners: list[tuple[CollectionQuery, ChangeListener]] = []
        self.failing: set[str] = set()
        self.count_delay = count_delay
        self.count_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    # ---- seeding ----

    def add(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any] | None = None,
        parent_id: str | None = None,
    ) -> None:
        self._docs.setdefault((collection, parent_id), {})[doc_id] = StoredDocument(
            id=doc_id,
            fields=dict(fields or {}),
            parent_id=parent_id,
            update_time=utc_now(),
        )

    def fail(self, *collections: str) -> None:
        self.failing.update(collections)

    def raw(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._docs.get((collection, None), {}).get(doc_id)
        return doc.fields if doc else None

    # ---- IDocumentStore ----

    def _check(self, collection: str) -> None:
        if collection in self.failing:
            raise StoreFailure(f"{collection} unavailable")

    def _select(self, query: CollectionQuery) -> list[StoredDocument]:
        self._check(query.collection)
        docs: list[StoredDocument] = []
        for (collection, parent_id), by_id in self._docs.items():
            if collection != query.collection:
                continue
            if parent_id is not None and not query.collection_group:
                continue
            docs.extend(by_id.values())
        docs = [d for d in docs if all(_matches(d.fields, f) for f in query.filters)]
        if query.order_by:
            docs = [d for d in docs if query.order_by in d.fields]
            docs.sort(key=lambda d: d.fields[query.order_by], reverse=query.descending)
        if query.limit is not None:
            docs = docs[: query.limit]
        return docs

    async def count(self, query: CollectionQuery) -> int:
        self.count_calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.count_delay:
                await asyncio.sleep(self.count_delay)
            return len(self._select(query))
        finally:
            self.in_flight -= 1

    async def fetch_all(self, query: CollectionQuery) -> list[StoredDocument]:
        return list(self._select(query))

    def subscribe(self, query: CollectionQuery, on_change: ChangeListener) -> Unsubscribe:
        entry = (query, on_change)
        self._listeners.append(entry)

        def detach() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return detach

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        self._check(collection)
        return self._docs.get((collection, None), {}).get(document_id)

    async def create(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self._check(collection)
        self.add(collection, document_id, data)

    async def update(self, collection: str, document_id: str, data: dict[str, Any]) -> bool:
        self._check(collection)
        doc = self._docs.get((collection, None), {}).get(document_id)
        if doc is None:
            return False
        doc.fields.update(data)
        doc.update_time = utc_now()
        return True

    async def delete(self, collection: str, document_id: str) -> None:
        self._check(collection)
        self._docs.get((collection, None), {}).pop(document_id, None)

    # ---- test helpers ----

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def trigger(self, collection: str) -> None:
        """Simulate a change notification for every watcher on `collection`."""
        for query, on_change in list(self._listeners):
            if query.collection == collection:
                await on_change()


def ts(value: str) -> datetime:
    """Aware UTC datetime from an ISO string, e.g. ts("2024-03-01T10:00:00")."""
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)
