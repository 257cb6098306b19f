"""WebSocket API schemas."""

from typing import Any

from pydantic import BaseModel, Field


class MetricUpdateMessage(BaseModel):
    """Frame pushed to report subscribers: {"type": "<family>_update", "data": ...}."""

    type: str = Field(..., description="<family>_update")
    data: Any


class WebSocketStatusResponse(BaseModel):
    """Response for GET /ws/status (connections per metric family)."""

    total_connections: int = Field(..., description="Number of active WebSocket connections")
    connections_by_family: dict[str, int] = Field(default_factory=dict)
