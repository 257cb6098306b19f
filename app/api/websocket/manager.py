"""WebSocket broadcast manager for live report metrics.

Holds active connections per metric family. The first connection for a
family opens one shared LiveMetric subscription; every push is broadcast to
that family's sockets; the last disconnect unsubscribes. Use via
app.state.ws_manager (set in lifespan).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, is_dataclass
from typing import Any

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from app.application.interfaces.document_store import Unsubscribe
from app.application.use_cases.reports import ReportsService
from app.domain.enums import MetricFamily

logger = logging.getLogger(__name__)


def _payload(snapshot: Any) -> Any:
    if isinstance(snapshot, list):
        return [_payload(item) for item in snapshot]
    if is_dataclass(snapshot):
        return jsonable_encoder(asdict(snapshot))
    return jsonable_encoder(snapshot)


class MetricBroadcastManager:
    """Manages WebSocket connections grouped by metric family.

    - connect/disconnect are lock-protected; sends happen outside the lock.
    - A socket joining a family that is already live gets the latest frame
      right away instead of waiting for the next change.
    - Dead sockets found while broadcasting are dropped, and the family's
      subscription is released when its last socket goes.
    """

    def __init__(self) -> None:
        self._connections: dict[MetricFamily, set[WebSocket]] = {}
        self._unsubscribers: dict[MetricFamily, Unsubscribe] = {}
        self._latest: dict[MetricFamily, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def connect(
        self, websocket: WebSocket, family: MetricFamily, reports: ReportsService
    ) -> None:
        """Accept and register a connection; subscribe the family on first use."""
        await websocket.accept()
        async with self._lock:
            self._connections.setdefault(family, set()).add(websocket)
            latest = self._latest.get(family)
            if family not in self._unsubscribers:

                async def on_update(snapshot: Any) -> None:
                    await self.broadcast(family, snapshot)

                self._unsubscribers[family] = reports.subscribe(family, on_update)
                logger.info("Opened live %s subscription", family.value)
        if latest is not None:
            await websocket.send_json(latest)

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a connection (call on disconnect)."""
        async with self._lock:
            self._remove_locked([websocket])

    def _remove_locked(self, sockets: list[WebSocket]) -> None:
        for family in list(self._connections):
            conns = self._connections[family]
            for ws in sockets:
                conns.discard(ws)
            if not conns:
                del self._connections[family]
                self._latest.pop(family, None)
                unsubscribe = self._unsubscribers.pop(family, None)
                if unsubscribe is not None:
                    unsubscribe()
                    logger.info("Closed live %s subscription", family.value)

    async def broadcast(self, family: MetricFamily, snapshot: Any) -> None:
        """Send {"type": "<family>_update", "data": ...} to every socket of the family."""
        message = {"type": f"{family.value}_update", "data": _payload(snapshot)}
        async with self._lock:
            if family not in self._connections:
                return
            self._latest[family] = message
            targets = list(self._connections[family])
        dead: list[WebSocket] = []
        for ws in targets:
            try:
                await ws.send_json(message)
            except Exception:
                dead.append(ws)
        if dead:
            logger.info("Dropping %d closed %s socket(s)", len(dead), family.value)
            async with self._lock:
                self._remove_locked(dead)

    async def close_all(self) -> None:
        """Release every family subscription (app shutdown)."""
        async with self._lock:
            self._remove_locked([ws for conns in self._connections.values() for ws in conns])

    async def get_connection_count(self) -> int:
        async with self._lock:
            return sum(len(c) for c in self._connections.values())

    async def get_connection_counts(self) -> dict[str, int]:
        async with self._lock:
            return {family.value: len(c) for family, c in self._connections.items()}
