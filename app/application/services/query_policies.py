"""Failure policies for individual store sub-queries.

A snapshot is built from many independent sub-queries. Each one is wrapped
here so a single failure degrades to a zero value instead of failing the
whole snapshot:

- safe_count / safe_fetch_all: failure -> 0 / [] (logged).
- FirstSuccessPolicy: ordered candidate resolvers, first success wins,
  default when every candidate fails.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

from app.application.interfaces.document_store import (
    CollectionQuery,
    IDocumentStore,
    StoredDocument,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def safe_count(store: IDocumentStore, query: CollectionQuery) -> int:
    """Count documents; a failed query counts as 0."""
    try:
        return await store.count(query)
    except Exception as e:
        logger.warning("Count on %s failed, using 0: %s", query.collection, e)
        return 0


async def safe_fetch_all(
    store: IDocumentStore, query: CollectionQuery
) -> list[StoredDocument]:
    """Fetch documents; a failed query yields an empty list."""
    try:
        return await store.fetch_all(query)
    except Exception as e:
        logger.warning("Read on %s failed, using empty result: %s", query.collection, e)
        return []


class FirstSuccessPolicy(Generic[T]):
    """Try resolvers in order and return the first successful result.

    Resolvers run sequentially; a later candidate is only tried when every
    earlier one raised. When all fail the policy returns its default.
    """

    def __init__(
        self,
        name: str,
        resolvers: Sequence[tuple[str, Callable[[], Awaitable[T]]]],
        default: T,
    ) -> None:
        if not resolvers:
            raise ValueError("FirstSuccessPolicy needs at least one resolver")
        self.name = name
        self._resolvers = list(resolvers)
        self._default = default

    @property
    def candidates(self) -> list[str]:
        return [label for label, _ in self._resolvers]

    async def resolve(self) -> T:
        for label, resolver in self._resolvers:
            try:
                result = await resolver()
            except Exception as e:
                logger.info("%s: candidate %s failed: %s", self.name, label, e)
                continue
            logger.debug("%s: resolved via %s", self.name, label)
            return result
        logger.warning(
            "%s: all candidates failed (%s), using default",
            self.name,
            ", ".join(self.candidates),
        )
        return self._default


def collection_count_policy(
    name: str, store: IDocumentStore, collections: Sequence[str]
) -> FirstSuccessPolicy[int]:
    """Count the first collection (in order) whose count query succeeds; 0 if none."""

    def _resolver(collection: str) -> Callable[[], Awaitable[int]]:
        return lambda: store.count(CollectionQuery(collection=collection))

    return FirstSuccessPolicy(
        name,
        [(collection, _resolver(collection)) for collection in collections],
        default=0,
    )
