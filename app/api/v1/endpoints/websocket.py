"""WebSocket endpoint: live report pushes per metric family.

Uses only the injected MetricBroadcastManager (set in lifespan); no manual
construction. Clients only receive; any text they send is ignored.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect

from app.api.v1.dependencies import get_subscription_registry
from app.application.services.subscription_registry import SubscriptionRegistry
from app.application.use_cases.reports import ReportsService
from app.core.config import get_settings
from app.domain.enums import MetricFamily
from app.schemas.websocket import WebSocketStatusResponse

router = APIRouter()


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


@router.websocket("/reports/{family}")
async def report_updates(
    websocket: WebSocket,
    family: str,
    registry: Annotated[SubscriptionRegistry, Depends(get_subscription_registry)],
):
    """Stream {"type": "<family>_update", "data": ...} frames for one report family.

    The first frame is sent right after connecting; later frames follow
    store changes.
    """
    try:
        metric_family = MetricFamily(family)
    except ValueError:
        await _reject_websocket(websocket, f"Unknown metric family: {family}")
        return
    store = getattr(websocket.app.state, "document_store", None)
    if store is None:
        await _reject_websocket(websocket, "Document store not configured", code=1011)
        return

    settings = get_settings()
    reports = ReportsService(
        store,
        registry,
        tz=settings.report_tz,
        user_growth_days=settings.user_growth_days,
    )
    manager = websocket.app.state.ws_manager
    await manager.connect(websocket, metric_family, reports)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket)


@router.get("/status", response_model=WebSocketStatusResponse)
async def websocket_status(request: Request) -> WebSocketStatusResponse:
    """Active live-report connections, total and per family."""
    manager = request.app.state.ws_manager
    return WebSocketStatusResponse(
        total_connections=await manager.get_connection_count(),
        connections_by_family=await manager.get_connection_counts(),
    )
