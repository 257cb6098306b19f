"""Fault-tolerant sub-query wrappers and first-success fallback."""

from unittest.mock import AsyncMock

import pytest

from app.application.interfaces.document_store import collection_query
from app.application.services.query_policies import (
    FirstSuccessPolicy,
    collection_count_policy,
    safe_count,
    safe_fetch_all,
)
from tests.fakes import InMemoryDocumentStore


async def test_safe_count_returns_zero_on_failure() -> None:
    store = InMemoryDocumentStore()
    store.add("users", "u1")
    assert await safe_count(store, collection_query("users")) == 1

    store.fail("users")
    assert await safe_count(store, collection_query("users")) == 0


async def test_safe_fetch_all_returns_empty_on_failure() -> None:
    store = InMemoryDocumentStore()
    store.add("events", "e1")
    store.fail("events")
    assert await safe_fetch_all(store, collection_query("events")) == []


async def test_first_success_stops_at_first_working_candidate() -> None:
    first = AsyncMock(side_effect=RuntimeError("missing index"))
    second = AsyncMock(return_value=7)
    third = AsyncMock(return_value=99)
    policy = FirstSuccessPolicy("test", [("a", first), ("b", second), ("c", third)], default=0)

    assert await policy.resolve() == 7
    first.assert_awaited_once()
    second.assert_awaited_once()
    third.assert_not_awaited()
    assert policy.candidates == ["a", "b", "c"]


async def test_first_success_default_when_all_fail() -> None:
    failing = AsyncMock(side_effect=RuntimeError("down"))
    policy = FirstSuccessPolicy("test", [("a", failing), ("b", failing)], default=[])
    assert await policy.resolve() == []
    assert failing.await_count == 2


async def test_first_success_keeps_a_successful_zero() -> None:
    """A successful empty result is an answer; fallbacks only run on failure."""
    empty = AsyncMock(return_value=0)
    fallback = AsyncMock(return_value=5)
    policy = FirstSuccessPolicy("test", [("a", empty), ("b", fallback)], default=-1)
    assert await policy.resolve() == 0
    fallback.assert_not_awaited()


def test_first_success_needs_a_resolver() -> None:
    with pytest.raises(ValueError):
        FirstSuccessPolicy("test", [], default=0)


async def test_collection_count_policy_falls_back_in_order() -> None:
    store = InMemoryDocumentStore()
    store.add("contacts", "c1")
    store.add("contacts", "c2")
    store.add("messages", "m1")
    store.fail("contactSubmissions")

    policy = collection_count_policy(
        "contacts", store, ["contactSubmissions", "contacts", "messages"]
    )
    assert await policy.resolve() == 2

    store.fail("contacts", "messages")
    assert await policy.resolve() == 0
