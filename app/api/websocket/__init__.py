"""WebSocket broadcast manager for live report metrics.

Used by the WebSocket endpoint to share one subscription per metric family.
"""

from app.api.websocket.manager import MetricBroadcastManager

__all__ = ["MetricBroadcastManager"]
