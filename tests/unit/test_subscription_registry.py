"""SubscriptionRegistry: ids, idempotent unregister, shutdown teardown."""

from unittest.mock import MagicMock

from app.application.services.subscription_registry import SubscriptionRegistry


def test_register_returns_unique_family_prefixed_ids() -> None:
    registry = SubscriptionRegistry()
    ids = {registry.register("analytics", MagicMock()) for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("analytics-") for i in ids)
    assert len(registry) == 50


def test_unregister_runs_teardown_once() -> None:
    registry = SubscriptionRegistry()
    teardown = MagicMock()
    sub_id = registry.register("engagement", teardown)

    assert registry.unregister(sub_id) is True
    assert registry.unregister(sub_id) is False
    teardown.assert_called_once_with()
    assert len(registry) == 0


def test_unregister_unknown_id_is_noop() -> None:
    registry = SubscriptionRegistry()
    assert registry.unregister("programs-1") is False


def test_teardown_all_releases_everything_even_if_one_fails() -> None:
    registry = SubscriptionRegistry()
    ok_a = MagicMock()
    broken = MagicMock(side_effect=RuntimeError("boom"))
    ok_b = MagicMock()
    registry.register("analytics", ok_a)
    registry.register("engagement", broken)
    registry.register("programs", ok_b)

    assert registry.teardown_all() == 3
    ok_a.assert_called_once()
    broken.assert_called_once()
    ok_b.assert_called_once()
    assert registry.active_ids() == []
    assert registry.teardown_all() == 0
