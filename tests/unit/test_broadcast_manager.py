"""MetricBroadcastManager with mocked sockets and report service."""

from dataclasses import dataclass
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.api.websocket import MetricBroadcastManager
from app.domain.enums import MetricFamily


@dataclass
class _Snapshot:
    total_users: int
    last_updated: datetime


def _socket() -> MagicMock:
    ws = MagicMock()
    ws.accept = AsyncMock()
    ws.send_json = AsyncMock()
    return ws


@pytest.fixture
def reports() -> MagicMock:
    service = MagicMock()
    service.unsubscribe = MagicMock()
    service.subscribe = MagicMock(return_value=service.unsubscribe)
    return service


async def test_first_connection_subscribes_once(reports: MagicMock) -> None:
    manager = MetricBroadcastManager()
    a, b = _socket(), _socket()
    await manager.connect(a, MetricFamily.ANALYTICS, reports)
    await manager.connect(b, MetricFamily.ANALYTICS, reports)

    reports.subscribe.assert_called_once()
    assert reports.subscribe.call_args.args[0] is MetricFamily.ANALYTICS
    assert await manager.get_connection_counts() == {"analytics": 2}


async def test_broadcast_serializes_dataclasses(reports: MagicMock) -> None:
    manager = MetricBroadcastManager()
    ws = _socket()
    await manager.connect(ws, MetricFamily.ANALYTICS, reports)

    stamp = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    await manager.broadcast(MetricFamily.ANALYTICS, _Snapshot(3, stamp))
    ws.send_json.assert_awaited_once_with(
        {
            "type": "analytics_update",
            "data": {"total_users": 3, "last_updated": "2024-03-01T10:00:00+00:00"},
        }
    )


async def test_push_callback_broadcasts_to_family(reports: MagicMock) -> None:
    manager = MetricBroadcastManager()
    ws = _socket()
    await manager.connect(ws, MetricFamily.PROGRAMS, reports)
    on_update = reports.subscribe.call_args.args[1]

    await on_update([])
    ws.send_json.assert_awaited_once_with({"type": "programs_update", "data": []})


async def test_late_joiner_receives_latest_frame(reports: MagicMock) -> None:
    manager = MetricBroadcastManager()
    first, late = _socket(), _socket()
    await manager.connect(first, MetricFamily.PROGRAMS, reports)
    await manager.broadcast(MetricFamily.PROGRAMS, [])

    await manager.connect(late, MetricFamily.PROGRAMS, reports)
    late.send_json.assert_awaited_once_with({"type": "programs_update", "data": []})


async def test_dead_socket_dropped_and_last_disconnect_unsubscribes(reports: MagicMock) -> None:
    manager = MetricBroadcastManager()
    alive, dead = _socket(), _socket()
    dead.send_json = AsyncMock(side_effect=RuntimeError("closed"))
    await manager.connect(alive, MetricFamily.ENGAGEMENT, reports)
    await manager.connect(dead, MetricFamily.ENGAGEMENT, reports)

    await manager.broadcast(MetricFamily.ENGAGEMENT, [])
    assert await manager.get_connection_count() == 1
    reports.unsubscribe.assert_not_called()

    await manager.disconnect(alive)
    reports.unsubscribe.assert_called_once()
    assert await manager.get_connection_count() == 0


async def test_close_all_releases_every_family(reports: MagicMock) -> None:
    manager = MetricBroadcastManager()
    await manager.connect(_socket(), MetricFamily.ANALYTICS, reports)
    await manager.connect(_socket(), MetricFamily.PROGRAMS, reports)

    await manager.close_all()
    assert reports.unsubscribe.call_count == 2
    assert await manager.get_connection_counts() == {}
