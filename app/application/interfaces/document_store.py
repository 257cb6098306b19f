"""Document store interface (port) for the application layer.

The hosted document database is an external collaborator. Use cases talk to
it only through IDocumentStore, which exposes generic count / read / watch
operations over a CollectionQuery, plus the few writes program CRUD needs.
Infrastructure implements it (Firestore REST); tests use an in-memory fake.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

FILTER_OPERATORS = frozenset({"==", ">=", "<=", ">", "<", "in"})

Unsubscribe = Callable[[], None]
ChangeListener = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class FieldFilter:
    """One (field, operator, value) predicate; queries AND them together."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")


@dataclass(frozen=True)
class CollectionQuery:
    """Read query against one collection (or every sub-collection with that id).

    collection_group=True matches every collection with this id at any depth,
    e.g. programs/{id}/enrollments.
    """

    collection: str
    filters: tuple[FieldFilter, ...] = ()
    order_by: str | None = None
    descending: bool = False
    limit: int | None = None
    collection_group: bool = False


@dataclass
class StoredDocument:
    """A raw document as returned by the store.

    parent_id is the id of the document that owns the sub-collection the
    document lives in (None for top-level collections).
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    parent_id: str | None = None
    update_time: datetime | None = None


def where(field_path: str, op: str, value: Any) -> FieldFilter:
    """Shorthand for FieldFilter, reads like the store's query builders."""
    return FieldFilter(field_path, op, value)


def collection_query(
    collection: str,
    *filters: FieldFilter,
    order_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
    collection_group: bool = False,
) -> CollectionQuery:
    """Build a CollectionQuery from positional filters."""
    return CollectionQuery(
        collection=collection,
        filters=tuple(filters),
        order_by=order_by,
        descending=descending,
        limit=limit,
        collection_group=collection_group,
    )


class IDocumentStore(Protocol):
    """Protocol for the document store client (DIP)."""

    async def count(self, query: CollectionQuery) -> int:
        """Return the number of documents matching the query (server-side count)."""

    async def fetch_all(self, query: CollectionQuery) -> list[StoredDocument]:
        """Return matching documents in query order."""

    def subscribe(
        self, query: CollectionQuery, on_change: ChangeListener
    ) -> Unsubscribe:
        """Call on_change whenever the query's result set changes; return a detach handle."""

    async def get(self, collection: str, document_id: str) -> StoredDocument | None:
        """Return one document, or None if it does not exist."""

    async def create(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        """Create a document with the given id."""

    async def update(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> bool:
        """Merge fields into an existing document; False if it does not exist."""

    async def delete(self, collection: str, document_id: str) -> None:
        """Delete a document (no-op if missing)."""
